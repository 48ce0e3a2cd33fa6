from html import escape

from judgement_drafter.app.api_models import JudgementDraft

DOCUMENT_HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="zh-CN">
<head>
<meta charset="utf-8">
<title>{page_title}</title>
<style>
  body {{ background: #f8fafc; margin: 0; }}
  .page {{ max-width: 56rem; margin: 2rem auto; padding: 6rem; background: #fff;
          font-family: "Noto Serif SC", "Songti SC", serif; font-size: 18px; color: #0f172a; }}
  .pre {{ white-space: pre-wrap; text-align: justify; line-height: 2; }}
  .indent {{ text-indent: 2em; line-height: 2.2; }}
  h1 {{ text-align: center; letter-spacing: 0.2em; font-size: 1.875rem; }}
  h2 {{ font-size: 1.25rem; margin-top: 2.5rem; }}
  h2.verdict {{ text-align: center; letter-spacing: 0.5em; padding: 1.5rem 0;
               border-top: 2px solid #0f172a; border-bottom: 2px solid #0f172a; }}
  .judgment {{ font-weight: bold; }}
  .closing {{ text-align: right; font-weight: bold; margin-top: 5rem; }}
</style>
</head>
<body>
<div class="page">
  <h1 class="pre">{title}</h1>
  <p class="pre">{partiesSection}</p>
  <p class="pre">{proceedings}</p>
  <h2>一、原告主张与被告辩称</h2>
  <div class="pre indent">{claimsAndDefense}</div>
  <h2>二、本院查明事实</h2>
  <div class="pre indent">{courtFindings}</div>
  <h2>三、本院认为</h2>
  <div class="pre indent">{courtReasoning}</div>
  <h2 class="verdict">判 决 结 果</h2>
  <div class="pre judgment">{judgment}</div>
  <div class="pre closing">{closing}</div>
</div>
</body>
</html>
"""


def render_draft_html(draft: JudgementDraft) -> str:
    """Read-only document page; section text shows literally with whitespace kept."""
    sections = {field: escape(value, quote=False) for field, value in draft.model_dump().items()}
    page_title = escape(draft.title.strip().splitlines()[0] if draft.title.strip() else "判决书草案")
    return DOCUMENT_HTML_TEMPLATE.format(page_title=page_title, **sections)

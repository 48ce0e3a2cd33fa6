from typing import List

from google.genai import types

from judgement_drafter.app.api_models import CASE_TYPE_LABELS, CaseDetails, JudgementDraft, Party

DRAFT_FIELDS = list(JudgementDraft.model_fields)

JUDGEMENT_DRAFT_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={field: types.Schema(type=types.Type.STRING) for field in DRAFT_FIELDS},
    required=DRAFT_FIELDS,
)

MISSING = "未填写"


def format_parties(parties: List[Party]) -> str:
    """One line per list: `name (身份/代码: ..., 地址: ...[, 电话: ...])` joined by '; '."""
    formatted = []
    for p in parties:
        phone = f", 电话: {p.phone}" if p.phone else ""
        formatted.append(
            f"{p.name} (身份/代码: {p.identity or MISSING}, 地址: {p.address or MISSING}{phone})"
        )
    return "; ".join(formatted)


def build_judgement_prompt(details: CaseDetails) -> str:
    case_type = CASE_TYPE_LABELS[details.caseType]

    return f"""
你是一位资深的中国高级法官。请起草一份{case_type}判决书草案。

【基本信息】
法院：{details.courtName}
案号：{details.caseNumber}

【当事人】
公诉机关：{format_parties(details.prosecutors)}
原告：{format_parties(details.plaintiffs)}
被告：{format_parties(details.defendants)}
第三人：{format_parties(details.thirdParties)}

【内容概要】
请求/指控：{details.claims}
查明事实：{details.facts}
证据：{details.evidence}
法律依据提示：{details.legalBasis}

请按照规范格式输出 JSON。
"""

import json
from types import SimpleNamespace

import pytest

from judgement_drafter.core import gemini_client

SAMPLE_DRAFT = {
    "title": "某某市中级人民法院\n民事判决书",
    "partiesSection": "原告：张三，男，住某某市。\n被告：某某有限公司。",
    "proceedings": "原告张三与被告某某有限公司买卖合同纠纷一案，本院立案后依法适用普通程序。",
    "claimsAndDefense": "原告诉称：被告拖欠货款。\n被告辩称：货物存在质量问题。",
    "courtFindings": "  经审理查明：双方于2023年签订买卖合同。",
    "courtReasoning": "本院认为：合同合法有效，被告应当支付货款 <含尖括号>。",
    "judgment": "一、被告于本判决生效之日起十日内支付原告货款100000元；\n二、驳回原告其他诉讼请求。",
    "closing": "审判长  王五\n二〇二四年一月一日\n书记员  赵六",
}


class FakeModels:
    """Stands in for genai.Client().models; replies are consumed in order."""

    def __init__(self):
        self.calls = []
        self.replies = []

    def queue(self, reply):
        self.replies.append(reply)

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, str):
            reply = json.dumps(reply, ensure_ascii=False)
        return SimpleNamespace(text=reply)


@pytest.fixture
def fake_gemini(monkeypatch):
    models = FakeModels()
    fake_client = SimpleNamespace(models=models)
    monkeypatch.setattr(gemini_client, "_get_client", lambda: fake_client)
    return models


@pytest.fixture
def sample_draft():
    return dict(SAMPLE_DRAFT)

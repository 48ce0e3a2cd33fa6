from google.genai import types

from judgement_drafter.app.api_models import ROLE_LIST_FIELDS

PARTY_LIST_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "role": types.Schema(type=types.Type.STRING, enum=list(ROLE_LIST_FIELDS)),
            "name": types.Schema(type=types.Type.STRING),
            "identity": types.Schema(type=types.Type.STRING),
            "address": types.Schema(type=types.Type.STRING),
            "phone": types.Schema(type=types.Type.STRING),
            "legalRep": types.Schema(type=types.Type.STRING),
            "agent": types.Schema(type=types.Type.STRING),
        },
        required=["role", "name"],
    ),
)


def build_party_extraction_prompt(text: str) -> str:
    return f"""
你是一个专业的法律助手。请从以下文本中提取案件当事人的信息。
文本内容：
\"\"\"
{text}
\"\"\"

提取要求：
1. 识别当事人角色（role）：原告(plaintiff)、被告(defendant)、第三人(third_party)、公诉机关(prosecutor)。
2. 提取姓名/名称(name)、证件号/信用代码(identity)、地址(address)、联系电话(phone)、法定代表人(legalRep)、代理人(agent)。
3. 如果某项缺失，留空。
4. 输出为 JSON 数组。
"""

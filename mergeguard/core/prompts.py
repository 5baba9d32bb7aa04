# mergeguard/core/prompts.py
from typing import Dict, List

SYSTEM_PROMPT = """\
You are a senior code reviewer focused on merge risk.
Return ONLY valid JSON. No markdown. No extra text.
Schema:
{
  "riskScore": 0,
  "riskLevel": "Low|Medium|High",
  "reasons": ["..."],
  "recommendedTests": ["..."]
}
Rules:
- riskScore is integer 0-100
- 3-6 reasons, short and evidence-based
- 3-6 recommendedTests, actionable
"""

USER_PROMPT = """\
Analyze this change and output the JSON schema above.

CHANGE:
{change_text}
"""


def build_messages(change_text: str) -> List[Dict[str, str]]:
    """Build the system + user chat messages for a block of change text."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        # change text may contain braces, so no str.format here
        {"role": "user", "content": USER_PROMPT.replace("{change_text}", change_text)},
    ]

"""Thin wrapper around an OpenAI-compatible chat-completions gateway.

Called with ``requests`` directly; the response is expected to carry a
``submit_feedback`` tool call whose arguments are the structured score.
"""

from flask import current_app
import requests
import json
from typing import Dict, Any


class FeedbackError(Exception):
    """The gateway call failed or returned something we cannot use."""


FEEDBACK_TOOL = {
    "type": "function",
    "function": {
        "name": "submit_feedback",
        "description": "Submit the interview feedback analysis",
        "parameters": {
            "type": "object",
            "properties": {
                "rating": {"type": "number", "description": "Overall rating from 1-10"},
                "technicalSkills": {"type": "number"},
                "communication": {"type": "number"},
                "problemSolving": {"type": "number"},
                "experience": {"type": "number"},
                "summary": {"type": "string"},
                "recommendation": {"type": "string", "enum": ["hire", "hold", "reject"]},
                "strengths": {"type": "array", "items": {"type": "string"}},
                "improvements": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["rating", "technicalSkills", "communication", "problemSolving",
                         "experience", "summary", "recommendation", "strengths", "improvements"],
            "additionalProperties": False,
        },
    },
}

SYSTEM_PROMPT = (
    "You are an expert HR interviewer analyzing interview transcripts. "
    "Evaluate the candidate's performance fairly and submit your feedback with the submit_feedback tool."
)


def _user_prompt(payload: Dict[str, Any]) -> str:
    questions = payload.get("questions") or []
    numbered = "\n".join(f"{i + 1}. {q}" for i, q in enumerate(questions))
    return (
        f"Position: {payload.get('position')}\n"
        f"Job Description: {payload.get('job_desc')}\n"
        f"Required Experience: {payload.get('job_experience')} years\n"
        f"Tech Stack: {payload.get('tech_stack')}\n\n"
        f"Interview Questions:\n{numbered}\n\n"
        f"Candidate: {payload.get('candidate_name')}\n\n"
        f"Interview Transcript:\n{payload.get('transcript')}"
    )


def extract_feedback(response_json: Dict[str, Any]) -> Dict[str, Any]:
    try:
        tool_call = response_json["choices"][0]["message"]["tool_calls"][0]
    except (KeyError, IndexError, TypeError):
        raise FeedbackError("Invalid AI response format")
    if tool_call.get("function", {}).get("name") != "submit_feedback":
        raise FeedbackError("Invalid AI response format")
    try:
        return json.loads(tool_call["function"]["arguments"])
    except (KeyError, TypeError, ValueError):
        raise FeedbackError("AI response arguments are not valid JSON")


def gen_feedback(payload: Dict[str, Any]) -> Dict[str, Any]:
    api_key = current_app.config.get('LLM_GATEWAY_API_KEY')
    if not api_key:
        raise FeedbackError('LLM_GATEWAY_API_KEY is not configured')

    body = {
        "model": current_app.config.get('LLM_MODEL'),
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": _user_prompt(payload)},
        ],
        "tools": [FEEDBACK_TOOL],
        "tool_choice": {"type": "function", "function": {"name": "submit_feedback"}},
    }
    headers = {
        'Authorization': f'Bearer {api_key}',
        'Content-Type': 'application/json',
    }
    try:
        r = requests.post(current_app.config['LLM_GATEWAY_URL'], headers=headers, json=body, timeout=60)
        r.raise_for_status()
    except requests.RequestException as e:
        current_app.logger.exception('LLM gateway call failed')
        raise FeedbackError('Failed to generate feedback from AI') from e
    return extract_feedback(r.json())

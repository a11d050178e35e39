"""
AI Evaluator Prompt Templates

Contains the coaching-style prompt used to evaluate a finished interview
from its transcribed answers, body-language snapshots and malpractice log.
"""

import json

from mockinterview.models.monitoring import IncidentCategory
from mockinterview.models.progress import InterviewBundle


class EvaluatorPrompts:
    """
    Prompt templates for the end-of-interview evaluation.

    Key principles:
    - Encouraging tone; weaknesses framed as opportunities
    - Specific praise drawn from the candidate's own answers
    - Visual malpractice addressed constructively in its own section
    - Audio disturbances only mentioned as an improvement tip
    """

    NO_INCIDENTS = "No malpractice was detected."

    OUTPUT_SCHEMA = """{{
    "criteria": [
        {{"name": "e.g. Technical Depth, Communication, Problem-Solving", "score": <0-5>, "maxScore": 5, "reasoning": "brief, specific justification framed positively"}}
    ],
    "strengths": ["2-3 specific, positive points using examples from the answers"],
    "weaknesses": ["2-3 areas framed as opportunities to polish"],
    "improvements": ["actionable, inspiring tips linked to the weaknesses"],
    "bodyLanguageAnalysis": {{
        "posture": "upright, slouched ...",
        "eyeContact": "focused on the camera or often looked away",
        "gestures": "use of hand gestures",
        "overallSummary": "holistic summary of non-verbal communication"
    }},
    "verbalAnalysis": {{
        "clarity": "clarity and structure of sentences",
        "conciseness": "answered directly or rambled",
        "fillerWords": "apparent use of filler words",
        "overallSummary": "summary of verbal communication style"
    }}{malpractice}
}}"""

    MALPRACTICE_SCHEMA = """,
    "malpracticeReport": {
        "summary": "summary of the detected malpractice incidents",
        "impactOnScore": "how this behavior can be perceived and how to avoid it"
    }"""

    def incident_summary(self, bundle: InterviewBundle) -> str:
        """Describe the logged incidents, split by category."""
        if not bundle.has_visual_malpractice() and not bundle.has_audio_issues():
            return self.NO_INCIDENTS

        logs = {
            f"Question {index + 1}": [
                f"[{incident.category.value}] {incident.message}" for incident in incidents
            ]
            for index, incidents in sorted(bundle.malpractice_logs.items())
            if incidents
        }
        lines = [f"The system logged the following events: {json.dumps(logs, indent=2)}."]
        if bundle.has_visual_malpractice():
            lines.append(
                f"- Visual malpractice events ([{IncidentCategory.VISUAL.value}], like phone use "
                "or suspicious gaze) MUST be addressed in the 'malpracticeReport' section. "
                "Frame it constructively."
            )
        if bundle.has_audio_issues():
            lines.append(
                f"- Audio disturbances ([{IncidentCategory.AUDIO.value}]) should be mentioned as a "
                "point for improvement in the 'improvements' section (e.g., 'Finding a quiet space "
                "for your interview can help you stay focused and appear more professional.'). "
                "Do not treat them as malpractice."
            )
        return "\n".join(lines)

    def generate_system_prompt(self, bundle: InterviewBundle) -> str:
        """System instruction for the evaluation call."""
        config = bundle.session.config
        if bundle.has_visual_malpractice():
            malpractice = self.MALPRACTICE_SCHEMA
            report_rule = "Include 'malpracticeReport' because visual malpractice was logged."
        else:
            malpractice = ""
            report_rule = "Omit 'malpracticeReport'."
        schema = self.OUTPUT_SCHEMA.format(malpractice=malpractice)

        return f"""You are an uplifting and motivational AI interview coach. Your primary goal is to empower the user, build their confidence, and provide actionable feedback for a {config.difficulty} {config.role} role. Your entire tone must be incredibly encouraging and positive.

=== CORE PRINCIPLES ===
1. Celebrate Strengths: Start with what the candidate did well. Be specific and use examples from their answers.
2. Frame "Weaknesses" as "Opportunities": Populate 'weaknesses' as "Areas to Polish", using forward-looking language.
3. Actionable & Inspiring Improvements: Provide clear, actionable tips and end on a high note.
4. Holistic View: Consider their transcribed answers and body language from the snapshots.

=== INPUT DATA ===
- Interview questions
- Transcribed candidate answers
- A series of body language snapshots taken during each answer
- Malpractice & Disturbance Logs: {self.incident_summary(bundle)}

=== REQUIRED OUTPUT ===
Provide your entire response as a single JSON object matching the structure below. Do not include any text outside of the JSON.
{report_rule}

{schema}"""

    def answer_header(self, index: int, question: str, answer: str) -> str:
        return (
            f"\n--- Question {index + 1}: {question} ---\n"
            f"Candidate's Answer: \"{answer or '(No answer provided)'}\"\n"
            "Body Language Snapshots during answer:\n"
        )

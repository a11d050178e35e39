"""
AI Interviewer Prompt Templates

Prompts for generating the fixed question set of an interview.
"""

from mockinterview.models.session import InterviewConfig


class InterviewerPrompts:
    """
    Prompt templates for the AI interviewer.

    Key principles:
    - Role- and seniority-appropriate questions
    - One clear question per entry
    - Answerable out loud in a few minutes
    """

    SYSTEM_CONTEXT = """You are an experienced interviewer at a top tech company preparing a mock interview.

Guidelines:
- Ask questions a real interviewer would ask for this role
- Mix behavioral and role-specific technical questions
- Keep each question to one or two sentences
- Questions will be answered out loud, so avoid anything that needs code or diagrams
"""

    def generate_questions_prompt(self, config: InterviewConfig, count: int = 5) -> str:
        """Generate prompt for creating the interview's question set."""

        prompt = f"""{self.SYSTEM_CONTEXT}

=== YOUR TASK ===
Generate {count} interview questions for a {config.difficulty} {config.role} position.

IMPORTANT: Output ONLY valid JSON, no preamble text. Start directly with {{

{{
    "questions": ["question 1", "question 2"]
}}"""

        return prompt

"""Resume Writer - turns a job description and profile into resume text."""

from __future__ import annotations

import logging

from resume_builder.clients.llm_client import LLMClient
from resume_builder.exceptions import EmptyJobDescription, Unauthenticated
from resume_builder.models.profile import CallerIdentity, ProfileSnapshot

logger = logging.getLogger(__name__)

# Generation policy. Not exposed to callers or config files.
TEMPERATURE = 0.7
MAX_TOKENS = 1500

SYSTEM_PROMPT = """\
You are an expert resume writer. Generate a professional resume based on the provided job description.
Format the resume in the following structure:

[Full Name]
[Job Title]

CONTACT
- Email: [appropriate email]
- Phone: [appropriate phone]
- Location: [appropriate location]
- LinkedIn: [appropriate LinkedIn URL]

SKILLS
- [Skill 1]
- [Skill 2]
- [Skill 3]
(List 5-7 relevant skills)

ACHIEVEMENTS
- [Achievement 1]
- [Achievement 2]
- [Achievement 3]
(List 3-4 significant achievements)

PROFILE
[Write a compelling professional summary in 3-4 sentences]

WORK EXPERIENCE
[Company Name] | [Location]
[Job Title] | [Date Range]
- [Responsibility/Achievement 1]
- [Responsibility/Achievement 2]
- [Responsibility/Achievement 3]
(Include 2-3 relevant positions)

EDUCATION
[Institution Name] | [Location]
[Degree/Certification] | [Date Range]
- [Relevant coursework or achievements]

Make it relevant to the job description while keeping it professional and impactful.
Use the provided user profile information where applicable."""


def build_user_prompt(job_description: str, profile: ProfileSnapshot | None) -> str:
    """Embed the job description verbatim plus the profile contact fields."""
    fields = (profile or ProfileSnapshot()).prompt_fields()
    return f"""Generate a resume for this job description: {job_description}
Using this user information:
Full Name: {fields["full_name"]}
Phone: {fields["phone"]}
Website: {fields["website"]}
Bio: {fields["bio"]}"""


class ResumeWriter:
    """Stateless generation service: one provider call per ``write``."""

    def __init__(self, llm: LLMClient, model: str = "claude-haiku-4-5-20251001"):
        self.llm = llm
        self.model = model

    async def write(
        self,
        job_description: str,
        profile: ProfileSnapshot | None,
        caller: CallerIdentity | None,
    ) -> str:
        """Generate resume text for ``job_description``.

        Input is validated before any network call. The provider's text is
        returned unmodified.
        """
        if caller is None:
            raise Unauthenticated()
        if not job_description or not job_description.strip():
            raise EmptyJobDescription()

        logger.info("Generating resume for user %s", caller.user_id)
        response = await self.llm.generate(
            prompt=build_user_prompt(job_description, profile),
            system=SYSTEM_PROMPT,
            model=self.model,
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
        )
        logger.info(
            "Resume generated for user %s (%d output tokens)",
            caller.user_id,
            response.output_tokens,
        )
        return response.text

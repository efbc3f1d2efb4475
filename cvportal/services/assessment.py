# cvportal/services/assessment.py
import json
import logging
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from cvportal.errors import AssessmentError
from cvportal.services.llm_backends import build_backend

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert HR analyst and ATS system. "
    "You must respond ONLY with valid JSON. No explanations, no markdown, no extra text."
)

# used when an assessment is requested without a job posting
GENERIC_JOB = {
    "title": "General Position",
    "description": "Evaluation for a general job position",
    "requirements": (
        "General work skills and experience - no specific position was given, "
        "so low scoring applies"
    ),
}


class AssessmentResult(BaseModel):
    overall_score: float = Field(ge=0, le=100)
    matched_skills: List[str] = []
    partial_skills: List[str] = []
    missing_skills: List[str] = []
    experience_level: Literal["Junior", "Mid", "Senior"]
    education_match: bool
    language_skills: List[str] = []
    strengths: List[str] = []
    weaknesses: List[str] = []
    recommendation: str
    ats_feedback: List[str] = []
    summary: str

    model_config = {"extra": "ignore"}


def build_assessment_prompt(cv_text: str, job_title: str, job_description: str, job_requirements: str) -> str:
    """
    Build the single instruction sent to the model.

    The scoring rules are prose for the model to follow; nothing here checks
    that the returned score obeys them.
    """
    return f"""CRITICAL: You MUST follow these rules exactly.

You are an expert HR analyst and ATS system.
Your task: compare the given CV text with the job posting details
and output ONLY a valid JSON object. No explanations, no markdown, no extra text.

FIRST AND MOST IMPORTANT RULE:
If the job title is "{GENERIC_JOB['title']}" or the job requirements are generic or vague,
overall_score MUST be between 20 and 30, NO EXCEPTIONS.
Even a candidate with 10+ years of experience gets a low score for a generic position.

Examples of GENERIC requirements (max 30 points):
- "Updated Requirements"
- "Test Requirements"
- "Generic Requirements"
- "Basic work skills"
- Any requirements without specific technical skills

CV Text:
{cv_text}

Job Posting:
Title: {job_title}
Description: {job_description}
Required Skills: {job_requirements}

Respond strictly in the following JSON schema:

{{
  "overall_score": number,                // 0-100 overall compatibility score
  "matched_skills": [string],
  "partial_skills": [string],
  "missing_skills": [string],
  "experience_level": "Junior|Mid|Senior",
  "education_match": boolean,
  "language_skills": [string],
  "strengths": [string],
  "weaknesses": [string],
  "recommendation": string,
  "ats_feedback": [string],
  "summary": string
}}

SCORING RULES:

1. GENERIC CHECK. The job is generic when any of these hold:
   - requirements contain only generic terms ("Basic work skills", "General position", "Work experience")
   - requirements are shorter than 20 characters
   - no specific technical skills (React, Python, SQL, ...) are mentioned
   - the title is "{GENERIC_JOB['title']}" or similar
   Then overall_score MUST be between 20 and 30.

2. SKILL MATCHING:
   - Extract ALL specific skills from the job requirements
   - Count how many of them the candidate actually has
   - match percentage = (matched_skills / total_required_skills) * 100

3. SCORE BANDS:
   - match >= 80%: overall_score 80-95
   - match >= 60%: overall_score 65-80
   - match >= 40%: overall_score 45-65
   - match < 40%: overall_score 20-45
   - match = 0%: overall_score 5-20

4. EXPERIENCE BONUS/PENALTY:
   - 5+ years relevant experience: +10 to +15 points
   - 10+ years relevant experience: +15 to +20 points
   - no relevant experience: -20 to -30 points
   - junior candidate for a senior job: -15 to -25 points
   - senior candidate for a senior job: +5 to +10 points

5. HIGH EXPERIENCE CASES (specific positions only, never generic ones):
   - 10+ years AND 70%+ skills: 85-95
   - 5+ years AND 80%+ skills: 80-90
   - Senior candidate AND senior job: at least 75
   - leadership or management experience: +5 to +10 points
   - 10+ years AND 80%+ skills: 90-95
   - 10+ years AND 90%+ skills: 95-100

6. OVERRIDES (highest priority):
   - generic job: overall_score MUST NOT exceed 30
   - no specific skills match: overall_score MUST NOT exceed 30
   - no relevant experience: overall_score MUST NOT exceed 40

7. QUALITY CHECKS:
   - CV text shorter than 100 characters: -20 points
   - CV without technical skills: -15 points
   - spelling or grammar errors: -5 to -10 points

FINAL RULES:
- Every text value in the JSON must be written in English.
- Example: "{GENERIC_JOB['title']}" + 10+ years experience = 20-30 points.
- Example: "Senior Frontend Developer" + 10+ years React experience = 85-95 points."""


def parse_assessment(text: Optional[str]) -> AssessmentResult:
    """Parse the model reply. Invalid JSON or a schema mismatch raises AssessmentError."""
    try:
        payload = json.loads(text or "")
    except json.JSONDecodeError as e:
        raise AssessmentError(f"Model reply is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise AssessmentError("Model reply is not a JSON object")

    try:
        return AssessmentResult.model_validate(payload)
    except ValidationError as e:
        raise AssessmentError(f"Model reply does not match the assessment schema: {e}") from e


def build_assessor(config):
    """Create the assessor for the model provider named in the app config."""
    return FitAssessor(build_backend(config))


class FitAssessor:
    """Sends one assessment request through a backend and parses the reply."""

    def __init__(self, backend):
        self.backend = backend

    def assess(self, cv_text, job_title, job_description, job_requirements) -> AssessmentResult:
        prompt = build_assessment_prompt(cv_text, job_title, job_description, job_requirements)
        logger.info("Requesting fit assessment for job '%s' via %s", job_title, type(self.backend).__name__)

        try:
            reply = self.backend.complete(SYSTEM_PROMPT, prompt)
        except AssessmentError:
            raise
        except Exception as e:
            raise AssessmentError(f"Model request failed: {e}") from e

        result = parse_assessment(reply)
        logger.info("Assessment finished for job '%s': score %s", job_title, result.overall_score)
        return result

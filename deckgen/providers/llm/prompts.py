"""
Prompt templates shared by every extraction provider.
"""
from __future__ import annotations

SYSTEM_INSTRUCTION = (
    "You are a recruitment assistant that turns documents into structured data. "
    "Always answer with a single valid JSON object and nothing else: no markdown, "
    "no commentary. Leave a field empty rather than inventing information. "
    "Always set \"id\" to 0."
)

EXTRACT_CANDIDATE_TEMPLATE = """\
**Objective:**
Analyze the raw text of a resume and structure it into a JSON object that
follows the JSON schema below exactly.

**Instructions:**
1. Identify the professional summary, work experience, skills and certifications.
2. List work experiences from most recent to oldest.
3. Populate every field of the schema as accurately as possible.

**JSON schema:**
{schema}

**Input Data (Raw Text from Resume "{name}"):**
---
{text}
"""

EXTRACT_JOB_AD_TEMPLATE = """\
**Objective:**
Analyze the raw text of a job advertisement and structure it into a JSON
object that follows the JSON schema below exactly.

**Instructions:**
1. Identify the job title, company name, location, responsibilities and qualifications.
2. Keep responsibilities and qualifications in the order they appear.
3. Copy the full input text into "raw_text".

**JSON schema:**
{schema}

**Input Data (Raw Text from Job Ad "{name}"):**
---
{text}
"""

ADAPT_TEMPLATE = """\
**Objective:**
Using the job advertisement and one or more resumes of the same candidate,
write a new resume, as a JSON object following the JSON schema below, that
highlights the candidate's most relevant skills and experiences for this job.

**Instructions:**
1. Read the job advertisement to understand its key requirements and responsibilities.
2. Review every resume provided to understand the candidate's background.
3. Merge them into concise, action-oriented content; do not invent experience.

**JSON schema:**
{schema}

--- Job Advertisement ---
{job_ad}

--- Candidate Resumes ---
{candidates}
"""

CANDIDATE_BLOCK_TEMPLATE = "\n--- Candidate Resume {index} ---\n{resume}"

from app.ai.types import ChatMessage

SYSTEM_PROMPT = "You are an expert ATS resume analyzer. Always return valid JSON responses."

RESPONSE_SCHEMA = """{
  "matchScore": <number between 0-100>,
  "matchedKeywords": [
    { "keyword": "<matched keyword>", "count": <number of times found in the resume> }
  ],
  "missingKeywords": [
    "<important missing keyword>"
  ],
  "suggestions": [
    {
      "id": "<unique_suggestion_id>",
      "type": "replace|add|enhance",
      "keyword": "<target keyword or skill>",
      "location": "<specific section like 'Work Experience - Job Title' or 'Skills Section'>",
      "originalText": "<exact text from resume to be modified>",
      "suggestedText": "<improved version with better keywords>",
      "reason": "<why this change will improve ATS score>",
      "impact": "high|medium|low",
      "category": "skills|experience|keywords|formatting"
    }
  ],
  "contextualInsights": {
    "resumeStrengths": ["<strength 1>", "<strength 2>"],
    "improvementAreas": ["<area 1>", "<area 2>"],
    "overallTone": "<professional|technical|creative|etc>",
    "experienceLevel": "<junior|mid|senior>"
  }
}"""

GUIDELINES = """Analysis Guidelines:
1. Match Score (0-100): Base on keyword overlap, skill alignment, and experience relevance.
2. Matched Keywords: Skills, technologies, and important terms present in both documents.
3. Missing Keywords: Crucial terms from the job description missing in the resume.
4. Suggestions: Provide 5-8 specific, actionable recommendations that:
   - Identify exact text in the resume that should be modified
   - Suggest replacements that align with the candidate's actual experience
   - Reword existing experience to match job description language
   - Keep the candidate's authentic experience while optimizing for ATS

Suggestion Types:
- "replace": Improve existing text with better keywords (originalText is required)
- "add": Add missing but relevant information
- "enhance": Expand on existing points with more detail

For each suggestion:
- Quote the EXACT text from the resume in originalText
- Provide the improved version in suggestedText
- Explain the ATS impact in reason
- Classify impact (high/medium/low) and category (skills/experience/keywords/formatting)"""


def build_analysis_messages(resume_text: str, job_description: str) -> list[ChatMessage]:
    user = (
        "You are an expert ATS (Applicant Tracking System) analyzer. "
        "Compare the resume text against the job description and provide a detailed analysis.\n\n"
        f"RESUME TEXT:\n{resume_text}\n\n"
        f"JOB DESCRIPTION:\n{job_description}\n\n"
        f"Return a JSON object with exactly this structure:\n{RESPONSE_SCHEMA}\n\n"
        f"{GUIDELINES}\n\n"
        "Return only valid JSON without any additional text or formatting."
    )
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=user),
    ]

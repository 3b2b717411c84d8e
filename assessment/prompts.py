QUIZ_QUESTION_COUNT = 5

QUIZ_TEMPLATE = """Create a challenging technical assessment quiz based on the job description below. The quiz should thoroughly evaluate a candidate's proficiency in the key technical skills required for this role.

Requirements:
1. Create exactly {count} questions that are highly specific to the technical stack and domain knowledge in the job description
2. Questions should be advanced level (senior/expert), not basic knowledge
3. Include a mix of:
   - Theoretical knowledge questions that test deep understanding
   - Scenario-based questions that assess problem-solving in realistic situations
   - Code or system design questions where appropriate
   - Edge cases and optimization questions

For each question:
- Provide 4 answer options that are technically detailed and plausible
- Only one option should be correct
- The wrong options should be realistic alternatives that someone might actually consider
- Include specific technical terminology, frameworks, or methodologies mentioned in the job description

For the correct answer:
- Provide a detailed technical explanation (3-5 sentences) of why it's correct

For each wrong answer, in option order:
- Provide a brief explanation (1-2 sentences) of why it's incorrect

Return ONLY a JSON array in this exact format with no additional text:
[
  {{
    "question": "Detailed technical question text",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correctAnswer": 0,
    "explanation": "Why the correct answer is right",
    "wrongExplanations": [
      "Why option B is wrong",
      "Why option C is wrong",
      "Why option D is wrong"
    ]
  }}
]

CANDIDATE RESUME (for calibrating difficulty only):
{resume}

Job Description: {jd}"""


ANALYSIS_TEMPLATE = """Act as an advanced AI-powered career advisor with expertise in technical recruiting. Conduct a comprehensive, data-driven analysis of the candidate's resume against the job description, incorporating their technical assessment quiz performance.

RESUME:
{resume}

JOB DESCRIPTION:
{jd}

QUIZ RESULTS:
The candidate scored {score}/{total} on a technical assessment quiz specifically designed for this role.
{quiz_details}
ANALYSIS FRAMEWORK:

1. TECHNICAL SKILLS MATCH (40% of total score):
   - Extract ALL technical skills, frameworks, languages, and tools mentioned in the job description
   - Weight each skill (1-3) by frequency, position, and required vs preferred
   - Rate the candidate's proficiency (0-5) by years, recency, context and project complexity
   - Calculate a weighted technical skills match percentage

2. EXPERIENCE RELEVANCE (25% of total score):
   - Industry relevance, role similarity, career progression, project scale

3. EDUCATION & QUALIFICATIONS (15% of total score):
   - Degree relevance, certifications, specialized training

4. QUIZ PERFORMANCE (20% of total score):
   - Convert the quiz score to a percentage
   - Weigh questions by relevance to core job requirements

5. FINAL COMPATIBILITY SCORE:
   - Combine the weighted category scores and normalize to 0-100

Identify the 3-5 most important skills the candidate should develop. For each skill provide:
1. 3 specific online courses with DIRECT LINKS, e.g. <a href="https://www.coursera.org/learn/machine-learning">Machine Learning by Stanford</a>
2. 2 free resources with DIRECT LINKS (documentation, GitHub repositories, YouTube channels)
3. 5 specific interview questions that test deep knowledge of the skill

Also include:
1. A brief professional summary of the match (2-3 sentences)
2. 3-4 key strengths that align with the role
3. 2-3 areas for growth
4. A 3-6 month learning roadmap: week-by-week for the first month, then month-by-month, with milestones and projects

FORMATTING:
- Use HTML with headers, paragraphs, and lists
- Include ACTUAL URLs in anchor tags, not placeholders
- Do not repeat resources

ADDITIONAL DATA FOR VISUALIZATION:
"skillsAnalysis" must list the top 8 skills from the job description, each with:
"skill", "relevance" (0-100), "match" (0-100), "gap" (0-100).

Return ONLY a JSON object in this exact format with no additional text:
{{
    "summary": "HTML formatted summary of the match",
    "analysis": "HTML formatted detailed analysis with strengths and weaknesses",
    "recommendations": "HTML formatted specific recommendations for improvement",
    "learningResources": "HTML formatted courses, free resources, and interview questions for each skill",
    "learningRoadmap": "HTML formatted 3-6 month learning plan",
    "skillsMatchPercentage": 75,
    "score": 70,
    "skillsAnalysis": [
        {{"skill": "JavaScript", "relevance": 90, "match": 85, "gap": 15}},
        {{"skill": "React", "relevance": 85, "match": 70, "gap": 30}}
    ],
    "strengths": ["Strong JavaScript fundamentals"],
    "areasForGrowth": ["Limited cloud experience"]
}}"""


KEY_SKILLS_TEMPLATE = """Extract the top 10 most important technical skills and technologies from this job description.
Return ONLY a JSON array of strings with no additional text or explanation.
Format your response as a valid JSON array like this: ["Skill1", "Skill2", "Skill3"]

Job Description: {jd}"""


RESUME_SKILLS_TEMPLATE = """Analyze this resume against the job description:

1. Extract all technical skills mentioned in the resume
2. Compare these skills with the job description requirements
3. For each skill in the resume, rate the match level (0-5) where:
   - 5: Expert level match, explicitly mentioned in both
   - 3-4: Good match, mentioned or implied in both
   - 1-2: Basic match, somewhat related but not directly mentioned
   - 0: Not relevant to the job description
4. Identify important skills from the job description missing in the resume

Return ONLY a JSON object in this exact format with no additional text:
{{
    "skills": ["skill1", "skill2"],
    "matchAnalysis": {{
        "skill1": {{"level": 5, "relevance": "high"}},
        "skill2": {{"level": 3, "relevance": "medium"}}
    }},
    "missingSkills": ["missing1", "missing2"]
}}

Resume: {resume}
Job Description: {jd}"""

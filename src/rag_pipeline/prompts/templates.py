"""Prompt templates keyed by (task, locale).

Every template is a ``str.format`` string; literal JSON braces are
doubled. Templates are fixed per locale and never translated at runtime.
"""

from enum import Enum


class PromptTask(str, Enum):
    """Tasks the pipeline can build prompts for."""

    TITLE = "title"
    DESCRIPTION = "description"
    CONTENT = "content"
    CV_ANALYSIS = "cv_analysis"
    CV_REWRITE = "cv_rewrite"
    JOB_MATCH = "job_match"


class Locale(str, Enum):
    """Output locales."""

    EN = "en"
    VI = "vi"

    @classmethod
    def parse(cls, value: "str | Locale | None") -> "Locale":
        """Resolve a locale flag, falling back to English for unknown values."""
        if isinstance(value, Locale):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.EN


NO_EXAMPLES = {
    Locale.EN: "No examples available",
    Locale.VI: "Không có ví dụ tham khảo",
}


# ── Title ────────────────────────────────────────────────────────────

TITLE_EN = """You are an expert blog title generator. Create an engaging, SEO-optimized title based on the user's input.

User Title: {title}

Relevant Examples from Knowledge Base:
{examples}

Instructions:
- Make it catchy and attention-grabbing
- Include relevant keywords for SEO
- Keep it under 60 characters
- Use title case
- Make it unique and original

Return only the title, nothing else."""

TITLE_VI = """Bạn là chuyên gia đặt tiêu đề blog. Hãy tạo một tiêu đề hấp dẫn, chuẩn SEO dựa trên nội dung người dùng cung cấp.

Tiêu đề của người dùng: {title}

Ví dụ liên quan từ kho tri thức:
{examples}

Yêu cầu:
- Tiêu đề thu hút, gây tò mò
- Chứa từ khóa liên quan cho SEO
- Dưới 60 ký tự
- Độc đáo, không sao chép ví dụ

Chỉ trả về tiêu đề, không thêm gì khác."""


# ── Description ──────────────────────────────────────────────────────

DESCRIPTION_EN = """You are an expert blog description writer. Create a compelling meta description for the blog post.

Title: {title}
User Description: {description}

Relevant Examples from Knowledge Base:
{examples}

Instructions:
- Write a concise summary (120-160 characters)
- Include call-to-action or hook
- Incorporate SEO keywords naturally
- Make it engaging and clickable
- Focus on value proposition

Return only the description, nothing else."""

DESCRIPTION_VI = """Bạn là chuyên gia viết mô tả blog. Hãy viết một đoạn meta description thuyết phục cho bài viết.

Tiêu đề: {title}
Mô tả của người dùng: {description}

Ví dụ liên quan từ kho tri thức:
{examples}

Yêu cầu:
- Tóm tắt ngắn gọn (120-160 ký tự)
- Có lời kêu gọi hành động hoặc điểm nhấn
- Lồng ghép từ khóa SEO một cách tự nhiên
- Hấp dẫn, khiến người đọc muốn nhấp vào
- Tập trung vào giá trị mang lại cho người đọc

Chỉ trả về đoạn mô tả, không thêm gì khác."""


# ── Content ──────────────────────────────────────────────────────────

CONTENT_EN = """You are an expert content enhancer. Improve and expand the user's blog content using the reference examples.

User Content: {content}

Relevant Examples from Knowledge Base:
{examples}

Instructions:
- Enhance the content with more details and examples
- Maintain the original meaning and structure
- Add relevant information from examples
- Improve readability and engagement
- Keep professional tone
- Expand to comprehensive article length
- Keep every {{{{IMAGE_n}}}} token exactly as written and in its original position

Return the enhanced content only."""

CONTENT_VI = """Bạn là chuyên gia biên tập nội dung. Hãy cải thiện và mở rộng nội dung blog của người dùng dựa trên các ví dụ tham khảo.

Nội dung của người dùng: {content}

Ví dụ liên quan từ kho tri thức:
{examples}

Yêu cầu:
- Bổ sung chi tiết và ví dụ minh họa
- Giữ nguyên ý nghĩa và cấu trúc ban đầu
- Thêm thông tin liên quan từ các ví dụ
- Tăng tính dễ đọc và hấp dẫn
- Giữ giọng văn chuyên nghiệp
- Mở rộng thành một bài viết đầy đủ
- Giữ nguyên mọi ký hiệu {{{{IMAGE_n}}}} đúng như ban đầu và đúng vị trí

Chỉ trả về nội dung đã cải thiện."""


# ── CV analysis ──────────────────────────────────────────────────────

CV_ANALYSIS_EN = """You are a CV expert. Analyze the CV and return JSON with ACTIONABLE data that can be directly applied.

CRITICAL: The 'data' field must contain ACTUAL content that can be used immediately, NOT instructions.

{{
  "overallScore": <0-100>,
  "strengths": ["strength1", "strength2", "strength3"],
  "weaknesses": ["weakness1", "weakness2", "weakness3"],
  "suggestions": [
    {{
      "id": "<uuid>",
      "type": "improvement|warning|error",
      "section": "summary|experience|education|skills",
      "message": "<issue description>",
      "suggestion": "<brief instruction>",
      "data": <actual data to apply>,
      "applied": false
    }}
  ]
}}

DATA FIELD FORMATS BY SECTION:
• skills: {{"skills": ["React", "Node.js", "Docker"]}} - Array of skill names
• summary: {{"text": "Full paragraph of professional summary ready to use"}}
• experience: {{"description": "Complete bullet points with STAR format and metrics"}}
• education: {{"field": "Computer Science", "degree": "Bachelor"}}
• dates: {{"startDate": "2021-01", "endDate": "2024-12"}}
• title: {{"text": "Senior Backend Developer"}}

Scoring:
- Personal Info (10%): Complete contact + 2-3 sentence summary
- Experience (50%): Action verbs + metrics + clear dates
- Education (20%): Relevant degree + school + dates
- Skills (20%): 5-7 relevant technical skills

CV:
{cv}

Reference examples of strong CV sections:
{examples}

Return ONLY JSON, no markdown."""

CV_ANALYSIS_VI = """Bạn là chuyên gia CV chuyên nghiệp. Phân tích CV và trả về JSON với dữ liệu CÓ THỂ ÁP DỤNG TRỰC TIẾP.

QUAN TRỌNG: Trường 'data' phải chứa nội dung THỰC TẾ có thể sử dụng ngay, KHÔNG PHẢI hướng dẫn.

{{
  "overallScore": <0-100>,
  "strengths": ["điểm mạnh 1", "điểm mạnh 2", "điểm mạnh 3"],
  "weaknesses": ["điểm yếu 1", "điểm yếu 2", "điểm yếu 3"],
  "suggestions": [
    {{
      "id": "<uuid>",
      "type": "improvement|warning|error",
      "section": "summary|experience|education|skills",
      "message": "<mô tả vấn đề>",
      "suggestion": "<hướng dẫn ngắn gọn>",
      "data": <dữ liệu thực tế để áp dụng>,
      "applied": false
    }}
  ]
}}

ĐỊNH DẠNG TRƯỜNG DATA THEO TỪNG SECTION:
• skills: {{"skills": ["React", "Node.js", "Docker"]}} - Mảng tên kỹ năng
• summary: {{"text": "Đoạn văn đầy đủ về tóm tắt chuyên môn sẵn sàng sử dụng"}}
• experience: {{"description": "Mô tả chi tiết theo format STAR với số liệu"}}
• education: {{"field": "Khoa học máy tính", "degree": "Cử nhân"}}
• dates: {{"startDate": "2021-01", "endDate": "2024-12"}}
• title: {{"text": "Senior Backend Developer"}}

Chấm điểm:
- Thông tin cá nhân (10%): Liên hệ đầy đủ + tóm tắt 2-3 câu
- Kinh nghiệm (50%): Động từ hành động + số liệu + ngày tháng rõ ràng
- Học vấn (20%): Bằng cấp liên quan + trường + ngày tháng
- Kỹ năng (20%): 5-7 kỹ năng kỹ thuật liên quan

CV:
{cv}

Ví dụ tham khảo các phần CV tốt:
{examples}

Chỉ trả về JSON, không có markdown."""


# ── CV section rewrite ───────────────────────────────────────────────

CV_REWRITE_EN = """[ROLE]
You are an award-winning CV writer who has helped 1000+ candidates pass ATS screening and land interviews.
Expertise: rewriting CV content with the STAR framework (Situation - Task - Action - Result).

[TASK]
Improve the '{section}' section in 3 steps:
1. Identify the main problems (missing action verbs, no metrics, sentences too long, etc.)
2. Rewrite using the STAR format
3. Cover enough ATS keywords while staying natural

[CONTEXT]
Target position: {job_title}
Requirements from the JD: {requirements}
Target industry: Technology

[WRITING RULES]
MUST START with a strong action verb:
  - Achieved, Accelerated, Built, Coordinated, Delivered, Engineered, Founded
  - Generated, Implemented, Led, Optimized, Pioneered, Reduced, Streamlined
MUST INCLUDE metrics:
  - Percentage: "Increased by 30%"
  - Absolute: "Managed team of 5 engineers"
  - Time: "Reduced processing time from 5h to 30min"
Length: 1-2 lines per bullet point
AVOID passive voice ("was responsible for", "helped to")
AVOID soft words ("many", "some", "various")

[REFERENCE EXAMPLES]
{examples}

[ORIGINAL TEXT]
{text}

[OUTPUT FORMAT]
Return ONLY the improved text, no explanation, no "Here is...".
Use bullet points for experience/education.
If metrics are missing from the input, use placeholders such as "[X%]" or "[Y users]"."""

CV_REWRITE_VI = """[VAI TRÒ]
Bạn là chuyên gia viết CV từng giúp 1000+ ứng viên vượt qua ATS và được mời phỏng vấn.
Chuyên môn: Viết lại nội dung CV theo chuẩn STAR (Situation - Task - Action - Result).

[NHIỆM VỤ]
Cải thiện section '{section}' theo 3 bước:
1. Xác định vấn đề chính (thiếu action verb, không có metrics, câu quá dài, ...)
2. Viết lại theo format STAR
3. Đảm bảo đủ keywords cho ATS nhưng vẫn tự nhiên

[NGỮ CẢNH]
Ứng viên đang apply cho: {job_title}
Requirement từ JD: {requirements}
Target industry: Technology

[QUY TẮC VIẾT]
PHẢI BẮT ĐẦU bằng Action Verb mạnh:
  - Achieved, Accelerated, Built, Coordinated, Delivered, Engineered, Founded
  - Generated, Implemented, Led, Optimized, Pioneered, Reduced, Streamlined
PHẢI CÓ metrics (số liệu):
  - Percentage: "Increased by 30%"
  - Absolute: "Managed team of 5 engineers"
  - Time: "Reduced processing time from 5h to 30min"
Độ dài: 1-2 dòng mỗi bullet point
TRÁNH passive voice ("was responsible for", "helped to")
TRÁNH soft words ("many", "some", "various")

[VÍ DỤ THAM KHẢO]
{examples}

[NỘI DUNG GỐC]
{text}

[ĐỊNH DẠNG ĐẦU RA]
Trả về CHỈ nội dung đã cải thiện, không giải thích, không thêm "Here is...".
Dùng bullet points nếu là experience/education.
Nếu thiếu số liệu, dùng placeholder như "[X%]", "[Y users]"."""


# ── Job match ────────────────────────────────────────────────────────

JOB_MATCH_EN = """Match the CV against the Job Description and return JSON with DIRECTLY APPLICABLE data.

CRITICAL: The 'data' field must contain ACTUAL content ready to use, NOT instructions.

{{
  "overallMatchScore": <0-100>,
  "detailedScores": {{
    "skillsMatch": <0-40>,
    "experienceMatch": <0-30>,
    "educationMatch": <0-15>,
    "culturalFit": <0-10>,
    "keywordsOptimization": <0-5>
  }},
  "missingKeywords": ["keyword1", "keyword2"],
  "suggestions": [
    {{
      "id": "<uuid>",
      "type": "improvement|warning|error",
      "section": "summary|experience|education|skills|general",
      "message": "<specific issue>",
      "suggestion": "<brief instruction>",
      "data": <actual data to apply>,
      "applied": false
    }}
  ]
}}

Criteria:
• Skills (40pts): % of JD skills in CV
• Experience (30pts): Years + industry match
• Education (15pts): Degree level + field match
• Cultural Fit (10pts): Work style + values match
• Keywords (5pts): ATS keyword coverage

Conditions:
- If the match score is below 70, include at least 5 suggestions of type "improvement"
- Every missing critical skill must appear in the suggestions
- Keywords must be unique

Job Description:
{job_description}

CV:
{cv}

Reference examples:
{examples}

Return JSON only, no markdown."""

JOB_MATCH_VI = """So khớp CV với Job Description và trả về JSON với dữ liệu CÓ THỂ ÁP DỤNG TRỰC TIẾP.

QUAN TRỌNG: Field 'data' phải chứa nội dung THỰC TẾ có thể dùng ngay, KHÔNG PHẢI hướng dẫn.

{{
  "overallMatchScore": <0-100>,
  "detailedScores": {{
    "skillsMatch": <0-40>,
    "experienceMatch": <0-30>,
    "educationMatch": <0-15>,
    "culturalFit": <0-10>,
    "keywordsOptimization": <0-5>
  }},
  "missingKeywords": ["keyword1", "keyword2"],
  "suggestions": [
    {{
      "id": "<uuid>",
      "type": "improvement|warning|error",
      "section": "summary|experience|education|skills|general",
      "message": "<vấn đề cụ thể>",
      "suggestion": "<hướng dẫn ngắn gọn>",
      "data": <dữ liệu thực tế để áp dụng>,
      "applied": false
    }}
  ]
}}

Tiêu chí:
• Skills (40đ): % skills từ JD có trong CV
• Experience (30đ): Số năm kinh nghiệm + industry match
• Education (15đ): Degree level + field phù hợp
• Cultural Fit (10đ): Work style + values match
• Keywords (5đ): ATS keywords coverage

Điều kiện:
- Nếu match score < 70, phải có ít nhất 5 suggestions type "improvement"
- Mọi kỹ năng quan trọng còn thiếu phải có trong suggestions
- Keywords không được trùng lặp

Job Description:
{job_description}

CV:
{cv}

Ví dụ tham khảo:
{examples}

Chỉ trả về JSON, không markdown."""


TEMPLATES: dict[tuple[PromptTask, Locale], str] = {
    (PromptTask.TITLE, Locale.EN): TITLE_EN,
    (PromptTask.TITLE, Locale.VI): TITLE_VI,
    (PromptTask.DESCRIPTION, Locale.EN): DESCRIPTION_EN,
    (PromptTask.DESCRIPTION, Locale.VI): DESCRIPTION_VI,
    (PromptTask.CONTENT, Locale.EN): CONTENT_EN,
    (PromptTask.CONTENT, Locale.VI): CONTENT_VI,
    (PromptTask.CV_ANALYSIS, Locale.EN): CV_ANALYSIS_EN,
    (PromptTask.CV_ANALYSIS, Locale.VI): CV_ANALYSIS_VI,
    (PromptTask.CV_REWRITE, Locale.EN): CV_REWRITE_EN,
    (PromptTask.CV_REWRITE, Locale.VI): CV_REWRITE_VI,
    (PromptTask.JOB_MATCH, Locale.EN): JOB_MATCH_EN,
    (PromptTask.JOB_MATCH, Locale.VI): JOB_MATCH_VI,
}


def get_template(task: PromptTask, locale: Locale) -> str:
    """Look up the template for a task and locale.

    Falls back to the English template when the locale has none.

    Raises:
        KeyError: If the task has no template at all
    """
    template = TEMPLATES.get((task, locale))
    if template is None:
        template = TEMPLATES[(task, Locale.EN)]
    return template

REWRITE_PROMPT_TEMPLATE = """You are an expert app review writer. Your task is to create a new app review by combining information from an existing app review and a Google Play app description.

**CRITICAL REQUIREMENTS:**
1. Return ONLY valid, well-formed HTML content starting with <p> tags
2. Ensure ALL HTML tags are properly opened and closed (e.g., <p>...</p>, <li>...</li>)
3. Do NOT include any explanations, thinking process, timestamps, or additional text
4. Follow the EXACT HTML structure and formatting from the reference review
5. Verify all <ul>, <li>, <p>, <h2>, <h3> tags are correctly formatted

**Instructions:**
1. Analyze the writing style, tone, and HTML formatting structure from the existing app review
2. Extract key features and information from the Google Play app description
3. Create a new, comprehensive app review that:
   - Maintains the same HTML formatting and structure as the reference review
   - Incorporates relevant features and details from the Google Play description
   - Uses a similar writing style and tone
   - Provides valuable insights for potential users
   - Keeps the same level of detail and organization

**Reference App Review (for style and HTML format):**
{reference_article}

**Google Play App Description (for content and features):**
{article}

Return only valid HTML content with proper tag structure:"""


def build_rewrite_prompt(article: str, reference_article: str) -> str:
    return REWRITE_PROMPT_TEMPLATE.format(
        article=article,
        reference_article=reference_article,
    )

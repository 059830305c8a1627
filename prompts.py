# prompts.py

from langchain_core.prompts import PromptTemplate

COMPLEMENTARY_PRACTICE_PROMPT = PromptTemplate.from_template(
    "I'm building a Rule of Life with these practices: {practices}. "
    "Suggest one complementary spiritual practice I might be missing, "
    "considering Christian and Messianic Jewish traditions. "
    "Keep it brief and practical."
)

FOUNDATIONAL_PRACTICE_PROMPT = PromptTemplate.from_template(
    "Suggest a foundational spiritual practice for someone starting a Rule of Life, "
    "drawing from Christian and Messianic Jewish traditions. "
    "Keep it brief and practical."
)

FALLBACK_SUGGESTION = "Unable to get suggestion at this time. Please try again."

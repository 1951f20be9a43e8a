"""Source Rating Prompt — prompt construction for the AI credibility check.

Invariants:
    - PURE: strings in, strings out
    - The prompt either embeds the fetched page content or states it was unavailable
    - The model is asked for exactly one JSON object matching the rating contract

Design Decisions:
    - System prompt static (cacheable), user message dynamic
    - strip_code_fences lives here so the parser and its tests share one definition
"""

import re

from arguably.core.page_content import PageContent

RATING_SYSTEM_PROMPT = """You are an unbiased fact-checker evaluating source credibility and the accuracy of a claim.

Rate the SOURCE from 1-5 based on:
- Authority and expertise of the source
- Verification and evidence quality
- Bias and objectivity
- Relevance to the claim

Evaluate the CLAIM as one of: "factual", "plausible", "misleading", "wrong".

CRITICAL INSTRUCTIONS:
- If website content is provided, analyze ONLY that content
- Do NOT make assumptions about what might be on the website
- If content is unavailable, clearly state this affects your rating
- If you cannot verify information, explicitly say "Unable to verify"

Return ONLY a JSON object, no markdown, no explanation:
{
  "rating": <integer 1-5, 5 is most credible>,
  "claimEvaluation": "factual" | "plausible" | "misleading" | "wrong",
  "confidence": "high" | "medium" | "low",
  "reasoning": ["3-5 concise bullet points explaining the rating"],
  "warning": "concern about the source or claim, or null",
  "suggestedCorrection": "accurate restatement when the claim is misleading or wrong, else null",
  "quoteExample": "supporting quote from the content when available, else null"
}"""

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


def build_rating_message(
    claim: str, source_url: str, page: PageContent, context: str | None = None,
) -> str:
    """Build the user message for one claim + source pair."""
    parts = [f"Rate this source URL: {source_url}", "", f"Context/Claim: {claim}"]
    if context:
        parts.append(f"\nAdditional context: {context}")

    if page.success:
        parts.append("\nACTUAL WEBSITE CONTENT EXTRACTED:")
        if page.title:
            parts.append(f"Title: {page.title}")
        if page.description:
            parts.append(f"Description: {page.description}")
        if page.text:
            parts.append(f"Content: {page.text}")
        parts.append(
            "\nIMPORTANT: Base your rating ONLY on this actual content. "
            "Do not make assumptions.",
        )
    else:
        parts.append(
            f"\nWARNING: Could not fetch website content ({page.error}). "
            "Rate based on URL structure and domain only. Be conservative with rating.",
        )
    return "\n".join(parts)


def strip_code_fences(text: str) -> str:
    """Remove ```json ... ``` wrapping the model sometimes adds."""
    return _FENCE_RE.sub("", text).strip()

"""
Content Moderation Pipeline
===========================
Runs after a post or comment has been stored and returned to its author:

    Created -> PendingClassification -> Retracted | Retained

1. Classify the text once with the configured classifier (no retries)
2. Not flagged, or any classifier failure -> Retained (fail-open)
3. Flagged -> delete the row; a retracted comment also decrements its
   post's comment count, a retracted post takes its comments with it
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Tuple

import openai
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import Settings
from ..logging_config import moderation_logger
from ..models import Comment, Post
from ..services.counters import CommentCounter


# ============================================================
# VERDICTS
# ============================================================

class ModerationOutcome(Enum):
    """Terminal states of a moderation pass"""
    RETAINED = "retained"
    RETRACTED = "retracted"


@dataclass
class ModerationVerdict:
    """Classifier decision for one piece of content"""
    flagged: bool
    category: Optional[str] = None
    source: str = "classifier"  # classifier, fallback, fail_open

    @classmethod
    def clear(cls, source: str = "classifier") -> "ModerationVerdict":
        return cls(flagged=False, source=source)


class ContentClassifier(Protocol):
    def classify(self, text: str) -> ModerationVerdict:
        ...


# ============================================================
# DENY-LIST FALLBACK
# ============================================================

# Only consulted when the classifier refuses to process the prompt itself
FALLBACK_TERMS: Tuple[str, ...] = ("murder", "kill", "weapon", "bomb", "terrorist", "suicide")


def fallback_verdict(text: str, terms: Tuple[str, ...] = FALLBACK_TERMS) -> ModerationVerdict:
    """Case-insensitive substring match against a small fixed term list"""
    lowered = text.lower()
    if any(term in lowered for term in terms):
        return ModerationVerdict(flagged=True, category="fallback_keyword", source="fallback")
    return ModerationVerdict.clear(source="fallback")


# ============================================================
# OPENAI-COMPATIBLE CLASSIFIER
# ============================================================

SYSTEM_PROMPT = "You are a content moderation system. Respond only with valid JSON."

MODERATION_PROMPT = """You are a content moderation system for a student social media platform. Analyze the following content and determine if it violates community guidelines.

Content to analyze: "{text}"

Check if the content contains:
- Harmful speech targeting groups
- Threats or intimidation
- Personal attacks or bullying
- Self-harm references
- Explicit adult content
- Graphic descriptions of harm
- Instructions for illegal activities
- Any other content inappropriate for a student platform

Respond ONLY with a JSON object in this exact format:
{{
  "flagged": true/false,
  "category": "category_name" or null
}}

If content is appropriate, set flagged to false. If inappropriate, set flagged to true and provide a brief category name."""


class OpenAIContentClassifier:
    """Classifies text with a chat completion model behind an OpenAI-compatible API"""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        model: str = "openai/gpt-4o",
        timeout: float = 10.0,
        client: Optional[openai.OpenAI] = None,
    ):
        self.model = model
        self.client = client or openai.OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["OpenAIContentClassifier"]:
        """Build a classifier, or None when moderation is off or has no credentials"""
        if not settings.moderation_enabled:
            return None
        if not settings.moderation_api_key:
            moderation_logger.warning("Moderation API key not set, content will not be moderated")
            return None
        return cls(
            api_key=settings.moderation_api_key,
            base_url=settings.moderation_base_url or None,
            model=settings.moderation_model,
            timeout=settings.moderation_timeout_seconds,
        )

    def classify(self, text: str) -> ModerationVerdict:
        if not text or not isinstance(text, str):
            return ModerationVerdict.clear()

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": MODERATION_PROMPT.format(text=text)},
                ],
                temperature=0.1,
                max_tokens=200,
            )
        except openai.APITimeoutError:
            moderation_logger.warning("Moderation request timed out")
            return ModerationVerdict.clear(source="fail_open")
        except openai.AuthenticationError as e:
            moderation_logger.error("Moderation authentication failed, check the API key", error=e)
            return ModerationVerdict.clear(source="fail_open")
        except openai.RateLimitError:
            moderation_logger.warning("Moderation rate limit hit")
            return ModerationVerdict.clear(source="fail_open")
        except openai.BadRequestError as e:
            if "content management policy" in str(e).lower():
                # The provider filtered our prompt; fall back to the deny-list
                moderation_logger.warning("Moderation prompt filtered, using fallback moderation")
                return fallback_verdict(text)
            moderation_logger.error("Moderation request rejected", error=e)
            return ModerationVerdict.clear(source="fail_open")
        except openai.OpenAIError as e:
            moderation_logger.error("Moderation request failed", error=e)
            return ModerationVerdict.clear(source="fail_open")

        content = response.choices[0].message.content if response.choices else None
        if not content:
            return ModerationVerdict.clear(source="fail_open")
        return self._parse(content)

    @staticmethod
    def _parse(content: str) -> ModerationVerdict:
        raw = content.strip()
        if raw.startswith("```"):
            raw = raw.strip("`")
            if raw.startswith("json"):
                raw = raw[4:]

        try:
            result = json.loads(raw)
        except json.JSONDecodeError as e:
            moderation_logger.error("Failed to parse moderation response", error=e, response=content[:200])
            return ModerationVerdict.clear(source="fail_open")

        if not isinstance(result, dict) or not result.get("flagged"):
            return ModerationVerdict.clear()
        return ModerationVerdict(flagged=True, category=result.get("category"))


# ============================================================
# PIPELINE
# ============================================================

class ModerationPipeline:
    """Classifies fresh content and retracts whatever gets flagged."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        counter: CommentCounter,
        classifier: Optional[ContentClassifier] = None,
    ):
        self.session_factory = session_factory
        self.counter = counter
        self.classifier = classifier

    def classify(self, text: str) -> ModerationVerdict:
        """One classification pass; never raises"""
        if self.classifier is None:
            return ModerationVerdict.clear(source="fail_open")
        try:
            return self.classifier.classify(text)
        except Exception as e:
            moderation_logger.error("Classifier raised, retaining content", error=e)
            return ModerationVerdict.clear(source="fail_open")

    def moderate_post(self, post_id: int, content: str) -> ModerationOutcome:
        verdict = self.classify(content)
        if not verdict.flagged:
            moderation_logger.debug("Post retained", post_id=post_id, source=verdict.source)
            return ModerationOutcome.RETAINED

        moderation_logger.info(
            "Post flagged",
            post_id=post_id,
            category=verdict.category,
            source=verdict.source,
        )
        self.retract_post(post_id)
        return ModerationOutcome.RETRACTED

    def moderate_comment(self, comment_id: int, post_id: int, content: str) -> ModerationOutcome:
        verdict = self.classify(content)
        if not verdict.flagged:
            moderation_logger.debug("Comment retained", comment_id=comment_id, source=verdict.source)
            return ModerationOutcome.RETAINED

        moderation_logger.info(
            "Comment flagged",
            comment_id=comment_id,
            post_id=post_id,
            category=verdict.category,
            source=verdict.source,
        )
        self.retract_comment(comment_id, post_id)
        return ModerationOutcome.RETRACTED

    def retract_post(self, post_id: int) -> bool:
        """
        Delete a post; its comments go with it through the foreign key cascade.

        Returns:
            True if a row was deleted, False if it was already gone or the delete failed
        """
        try:
            with self.session_factory() as db:
                result = db.execute(delete(Post).where(Post.id == post_id))
                db.commit()
        except SQLAlchemyError as e:
            moderation_logger.error(f"Failed to delete post {post_id}", error=e, post_id=post_id)
            return False

        if result.rowcount == 0:
            moderation_logger.debug("Post already gone", post_id=post_id)
            return False
        moderation_logger.info("Post retracted", post_id=post_id)
        return True

    def retract_comment(self, comment_id: int, post_id: int) -> bool:
        """
        Delete a comment and decrement its post's count.

        The decrement only follows a delete that actually removed the row, so
        repeated retractions never count the same comment twice.
        """
        try:
            with self.session_factory() as db:
                result = db.execute(delete(Comment).where(Comment.id == comment_id))
                db.commit()
        except SQLAlchemyError as e:
            moderation_logger.error(f"Failed to delete comment {comment_id}", error=e, comment_id=comment_id)
            return False

        if result.rowcount == 0:
            moderation_logger.debug("Comment already gone", comment_id=comment_id)
            return False

        try:
            self.counter.decrement(post_id)
        except SQLAlchemyError as e:
            moderation_logger.error(
                "Failed to decrement comment count",
                error=e,
                comment_id=comment_id,
                post_id=post_id,
            )
        moderation_logger.info("Comment retracted", comment_id=comment_id, post_id=post_id)
        return True

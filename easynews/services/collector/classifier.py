"""Topic classification and simplification.

Two classifiers live here:

1. ClassifierGateway: one LLM call per topic cluster returning the
   category together with the simplified title and text. Failures are
   returned as tagged results instead of raised.
2. HeuristicClassifier: keyword patterns over a title, used by the
   allocator to pick backfill candidates without calling the LLM.
"""

import json
import re
import unicodedata
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from easynews.core.exceptions import ClassificationError
from easynews.core.logging import get_logger
from easynews.core.types import CATEGORY_KEYS, Category, normalize_category
from easynews.infrastructure.llm import LLMClient, LLMConfig, LLMError, get_llm_client
from easynews.prompts.manager import PromptManager, PromptType, get_prompt_manager
from easynews.services.collector.base import FinishedArticle, SourceRef, TopicCluster
from easynews.services.collector.response_parser import extract_first_json_object
from easynews.services.digest.text_utils import clean_simplified_text, extract_source_domains

logger = get_logger(__name__)

# Body text sent to the model per cluster
MAX_PROMPT_TEXT_CHARS = 4000


# ============================================
# Tagged results
# ============================================


class ClassificationOk(BaseModel):
    """Successful classification.

    Attributes:
        category: Category from the closed enumeration
        reason: Short explanation from the model
        simple_title: Simplified title
        simple_text: Simplified, link-free body
        is_sensitive: Content must not be published
    """

    kind: Literal["ok"] = "ok"
    topic_id: str
    category: str
    reason: str = ""
    simple_title: str
    simple_text: str
    is_sensitive: bool = False


class ClassificationParseError(BaseModel):
    """The model answered, but not with the expected JSON."""

    kind: Literal["parse_error"] = "parse_error"
    topic_id: str
    message: str
    raw_response: str = ""


class ClassificationCallError(BaseModel):
    """The model call itself failed."""

    kind: Literal["call_error"] = "call_error"
    topic_id: str
    message: str


ClassificationOutcome = Annotated[
    ClassificationOk | ClassificationParseError | ClassificationCallError,
    Field(discriminator="kind"),
]


def parse_classification(topic_id: str, response_text: str) -> ClassificationOk:
    """Parse the model's JSON answer.

    An unknown category is mapped to the default category here, so every
    successful result carries a valid category.

    Args:
        topic_id: Cluster id
        response_text: Raw model output

    Returns:
        ClassificationOk

    Raises:
        ClassificationError: With stage "parse" if the answer is unusable
    """
    try:
        data = extract_first_json_object(response_text)
    except json.JSONDecodeError as e:
        raise ClassificationError(
            f"Response is not a JSON object: {e}", topic_id=topic_id, stage="parse"
        ) from e

    simple_text = data.get("simple_text")
    if not isinstance(simple_text, str) or not simple_text.strip():
        raise ClassificationError("Response has no simple_text", topic_id=topic_id, stage="parse")

    simple_title = data.get("simple_title")
    reason = data.get("reason")
    raw_category = data.get("category")
    category = normalize_category(raw_category)
    if category != raw_category:
        logger.warning(
            "Classifier returned unknown category",
            topic_id=topic_id,
            raw_category=str(raw_category)[:40],
            category=category,
        )

    return ClassificationOk(
        topic_id=topic_id,
        category=category,
        reason=reason if isinstance(reason, str) else "",
        simple_title=simple_title.strip() if isinstance(simple_title, str) else "",
        simple_text=simple_text,
        is_sensitive=data.get("is_sensitive") is True,
    )


def build_article(cluster: TopicCluster, result: ClassificationOk) -> FinishedArticle:
    """Combine a cluster with its classification into an article.

    Args:
        cluster: Classified cluster
        result: Successful classification of that cluster

    Returns:
        FinishedArticle with the cluster id
    """
    sources = [
        SourceRef(title=m.title, url=m.source_url, source_name=m.source_name)
        for m in cluster.members
    ]
    return FinishedArticle(
        id=cluster.id,
        title=cluster.title,
        simple_title=result.simple_title or cluster.title,
        simple_text=clean_simplified_text(result.simple_text),
        category=result.category,
        category_reason=result.reason,
        sources=sources,
        source_domains=extract_source_domains([s.url for s in sources]),
        image_url=cluster.image_url,
        video_url=cluster.video_url,
        published_at=cluster.published_at,
        is_sensitive=result.is_sensitive,
    )


# ============================================
# LLM gateway
# ============================================


class ClassifierGateway:
    """Classifies and simplifies topic clusters with a single LLM call each.

    Attributes:
        llm_client: LLM client
        prompt_manager: Prompt template manager
    """

    def __init__(
        self,
        llm_client: LLMClient | None = None,
        prompt_manager: PromptManager | None = None,
    ):
        """Initialize gateway.

        Args:
            llm_client: LLMClient instance (default: singleton)
            prompt_manager: PromptManager instance (default: singleton)
        """
        self.llm_client = llm_client or get_llm_client()
        self.prompt_manager = prompt_manager or get_prompt_manager()

    async def classify_and_summarize(self, cluster: TopicCluster) -> ClassificationOutcome:
        """Classify one cluster and simplify its text.

        Never raises for model failures; they come back as tagged errors.

        Args:
            cluster: Cluster to classify

        Returns:
            ClassificationOk, ClassificationParseError or ClassificationCallError
        """
        messages = self.prompt_manager.build_messages(
            PromptType.NEWS_CLASSIFICATION,
            title=cluster.title,
            source_names=cluster.source_names,
            text=cluster.combined_text(MAX_PROMPT_TEXT_CHARS),
            categories=CATEGORY_KEYS,
        )
        settings = self.prompt_manager.get_llm_settings(PromptType.NEWS_CLASSIFICATION)

        try:
            response = await self.llm_client.complete(
                config=LLMConfig.for_task(settings.temperature),
                messages=messages,
            )
        except LLMError as e:
            logger.error("Classification call failed", topic_id=cluster.id, error=str(e))
            return ClassificationCallError(topic_id=cluster.id, message=str(e))

        try:
            result = parse_classification(cluster.id, response.content)
        except ClassificationError as e:
            logger.error(
                "Classification response unparseable",
                topic_id=cluster.id,
                error=str(e),
                response=response.content[:200],
            )
            return ClassificationParseError(
                topic_id=cluster.id,
                message=str(e),
                raw_response=response.content,
            )

        logger.debug(
            "Cluster classified",
            topic_id=cluster.id,
            category=result.category,
            sensitive=result.is_sensitive,
        )
        return result

    async def produce_article(self, cluster: TopicCluster) -> FinishedArticle | None:
        """Classify a cluster and build its article.

        Args:
            cluster: Cluster to classify

        Returns:
            FinishedArticle, or None when classification failed or the
            content is sensitive
        """
        outcome = await self.classify_and_summarize(cluster)
        if not isinstance(outcome, ClassificationOk):
            return None

        if outcome.is_sensitive:
            logger.info("Sensitive article dropped", topic_id=cluster.id, title=cluster.title[:60])
            return None

        return build_article(cluster, outcome)


# ============================================
# Keyword heuristic
# ============================================


def _fold(text: str) -> str:
    """Lowercase and strip accents ("Σεισμός" and "ΣΕΙΣΜΟΣ" match alike)."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).replace("ς", "σ")


def _compile(*stems: str) -> re.Pattern[str]:
    return re.compile("|".join(re.escape(_fold(s)) for s in stems))


# Checked in order; the first matching category wins
_KEYWORD_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    (
        Category.SPORTS.value,
        _compile(
            "ποδόσφαιρ", "μπάσκετ", "eurobasket", "euroleague", "super league",
            "champions league", "πρωτάθλημ", "γκολ", "αγώνα", "αγώνας", "ματς",
            "παναθηναϊκ", "ολυμπιακ", "παοκ", "εθνική ομάδα",
            "τένις", "βόλεϊ", "στίβο", "τερματοφύλακ", "προπονητ", "nba",
            "football", "basketball",
        ),
    ),
    (
        Category.SCREEN.value,
        _compile(
            "ταινία", "ταινίες", "σινεμά", "κινηματογρ", "τηλεόραση", "τηλεοπτικ",
            "τηλεθέαση", "σειρά του", "επεισόδι", "netflix", "ηθοποι", "σκηνοθέτ",
            "όσκαρ", "oscar", "film", "movie", "streaming",
        ),
    ),
    (
        Category.CULTURE.value,
        _compile(
            "θέατρ", "παράσταση", "συναυλί", "μουσικ", "τραγουδ", "μουσεί",
            "βιβλί", "λογοτεχν", "φεστιβάλ", "όπερα", "πολιτισμ", "ζωγραφ",
            "εικαστικ", "αρχαιολογ", "concert", "museum", "theatre", "festival",
        ),
    ),
    (
        Category.FUN.value,
        _compile(
            "βόλτ", "εκδρομ", "διασκέδασ", "γιορτ", "πάρτι", "εστιατόρι",
            "συνταγ", "ταξίδ", "παραλί", "εκδήλωσ", "χριστούγενν", "απόκρι",
            "πάσχα", "διακοπ", "παιχνίδι", "κατοικίδι",
        ),
    ),
    (
        Category.SERIOUS.value,
        _compile(
            "κυβέρνησ", "βουλή", "υπουργ", "πρωθυπουργ", "εκλογ", "κόμμα",
            "οικονομ", "φόρο", "συντάξ", "μισθ", "τράπεζ", "πληθωρισμ",
            "σεισμ", "φωτιά", "πυρκαγι", "πλημμύρ", "κακοκαιρί", "τροχαί",
            "σύλληψ", "αστυνομ", "δολοφον", "νοσοκομ", "υγεία", "σχολεί",
            "απεργ", "πόλεμ", "ουκρανί", "γάζα", "election", "government",
            "economy",
        ),
    ),
]


class HeuristicClassifier:
    """Predicts a category from a title with keyword patterns.

    No external calls; cheap enough to run on every backfill candidate.
    """

    def __init__(self, patterns: list[tuple[str, re.Pattern[str]]] | None = None):
        """Initialize classifier.

        Args:
            patterns: Ordered (category, pattern) pairs; patterns must match
                      accent-folded lowercase text
        """
        self.patterns = patterns or _KEYWORD_PATTERNS

    def predict(self, title: str) -> str | None:
        """Predict the category of a title.

        Args:
            title: Topic title

        Returns:
            First matching category, or None when nothing matches
        """
        folded = _fold(title or "")
        for category, pattern in self.patterns:
            if pattern.search(folded):
                return category
        return None

    def matches(self, title: str, category: str) -> bool:
        """Whether the title is predicted to belong to the category."""
        return self.predict(title) == category


__all__ = [
    "ClassificationCallError",
    "ClassificationOk",
    "ClassificationOutcome",
    "ClassificationParseError",
    "ClassifierGateway",
    "HeuristicClassifier",
    "build_article",
    "parse_classification",
]

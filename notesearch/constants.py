from enum import StrEnum


class MatchType(StrEnum):
    EXACT = "exact"
    FUZZY = "fuzzy"
    SEMANTIC = "semantic"
    NLP = "nlp"


class QueryIntent(StrEnum):
    QUESTION = "question"
    SEARCH = "search"
    CREATE = "create"
    GENERAL = "general"


# Keyword triggers for intent detection, checked in this order.
INTENT_KEYWORDS: list[tuple[QueryIntent, tuple[str, ...]]] = [
    (QueryIntent.QUESTION, ("how", "what", "why")),
    (QueryIntent.SEARCH, ("find", "search", "look")),
    (QueryIntent.CREATE, ("create", "add", "new")),
]

# Per-field weights of the exact matcher
EXACT_TITLE_WEIGHT = 1.0
EXACT_CONTENT_WEIGHT = 0.8
EXACT_TAG_WEIGHT = 0.6

# Per-field weights of the fuzzy matcher
FUZZY_TITLE_WEIGHT = 0.4
FUZZY_CONTENT_WEIGHT = 0.4
FUZZY_TAG_WEIGHT = 0.2
FUZZY_HIGHLIGHT_THRESHOLD = 0.7

# Semantic context similarity
ENTITY_MATCH_WEIGHT = 0.4
TOPIC_MATCH_WEIGHT = 0.3
QUESTION_TOPIC_BONUS = 0.3
SEMANTIC_HIGHLIGHT_THRESHOLD = 0.3

# NLP sub-score
NLP_KEYWORD_WEIGHT = 0.3
NLP_ENTITY_WEIGHT = 0.4
NLP_TAG_WEIGHT = 0.2
NLP_QUESTION_BONUS = 0.1
NLP_SUBSCORE_WEIGHT = 0.5
NLP_ENTITY_SCORE_WEIGHT = 0.3
NLP_INTENT_SCORE_WEIGHT = 0.2
NLP_SHORT_BODY_CHARS = 100

MAX_HIGHLIGHTS = 3
EXACT_EXCERPT_PADDING = 50
CLUSTER_KEYWORD_COUNT = 5
CONTEXTUAL_SUGGESTION_LIMIT = 5

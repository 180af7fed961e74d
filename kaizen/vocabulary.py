"""
Vocabulary — Detector Word Lists and Pattern Fragments

Every list the detectors match against lives here, grouped into one
immutable Vocabulary record. Detectors never reference these literals
directly; they are compiled from whatever Vocabulary they are given.
Extending or localizing the catalog means building a new Vocabulary
(dataclasses.replace works well), not editing control flow.

Two kinds of entries:
  - *_terms / *_keywords / *_triggers / *_fragments: plain text, escaped
    before compilation.
  - *_patterns: raw regex fragments, used as-is.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Vocabulary:
    """Immutable detector configuration."""

    # --- Lexical heuristics ---
    keyboard_fragments: tuple[str, ...]

    # --- Profanity (start-anchored word boundary) ---
    profanity_terms: tuple[str, ...]

    # --- Prompt injection / security (substring containment) ---
    injection_triggers: tuple[str, ...]

    # --- Off-topic (topic channel) ---
    question_patterns: tuple[str, ...]
    linkedin_exempt_terms: tuple[str, ...]
    off_topic_keywords: tuple[str, ...]
    code_request_patterns: tuple[str, ...]

    # --- Audience plausibility (audience channel) ---
    audience_role_patterns: tuple[str, ...]
    audience_collective_terms: tuple[str, ...]
    audience_relational_pattern: str

    def sizes(self) -> dict[str, int]:
        """Entry count per list, for the /thresholds endpoint and reports."""
        return {
            "keyboard_fragments": len(self.keyboard_fragments),
            "profanity_terms": len(self.profanity_terms),
            "injection_triggers": len(self.injection_triggers),
            "question_patterns": len(self.question_patterns),
            "linkedin_exempt_terms": len(self.linkedin_exempt_terms),
            "off_topic_keywords": len(self.off_topic_keywords),
            "code_request_patterns": len(self.code_request_patterns),
            "audience_role_patterns": len(self.audience_role_patterns),
            "audience_collective_terms": len(self.audience_collective_terms),
        }


# ============================================================
# DEFAULT LISTS
# ============================================================

KEYBOARD_FRAGMENTS: tuple[str, ...] = (
    "qwer", "asdf", "zxcv", "wasd", "jkl", "fgh", "uiop", "hjkl",
    "qaz", "wsx", "edc", "rfv", "tgb", "yhn", "ujm",
)

PROFANITY_TERMS: tuple[str, ...] = (
    "fuck",
    "shit",
    "bitch",
    "asshole",
    "bastard",
    "dick",
    "pussy",
    "whore",
    "slut",
    "nigger",
    "faggot",
    "retard",
    "damn",
    "crap",
    "stfu",
    "wtf",
    "lmao",
    "bullshit",
    "dumbass",
    "motherfucker",
    "idiot",
)

INJECTION_TRIGGERS: tuple[str, ...] = (
    "ignore previous",
    "ignore above",
    "system prompt",
    "jailbreak",
    "act as",
    "you are now",
    "pretend you",
    "bypass",
    "override",
    "write code",
    "console.log",
    "sql injection",
    "drop table",
    "rm -rf",
    "sudo",
    "malware",
    "virus",
    "exploit",
    "script>",
    "<script",
    "eval(",
    "exec(",
    "import os",
)

# Anchored at the start of the normalized input.
QUESTION_PATTERNS: tuple[str, ...] = (
    r"^what (?:is|are|was|were|does|do|did) ",
    r"^how (?:to|do|does|did|can|could) (?:make|cook|bake|solve|fix|calculate)",
    r"^who (?:is|was|are|were) ",
    r"^where (?:is|are|was|were|can|do) ",
    r"^when (?:is|was|did|does|will) ",
    r"^can you (?:tell|explain|help|write|code|solve|calculate)",
    r"^please (?:write|code|solve|calculate|explain|tell)",
    r"^(?:define|translate|convert|calculate|compute|solve) ",
)

# Whole words; "freelanc" is kept as a stem to match the original list.
LINKEDIN_EXEMPT_TERMS: tuple[str, ...] = (
    "career", "job", "work", "startup", "business", "team", "leader",
    "developer", "company", "hire", "fired", "growth", "revenue",
    "customer", "client", "marketing", "brand", "product", "skill",
    "interview", "salary", "promotion", "manager", "ceo", "founder", "cto",
    "freelanc", "remote", "office", "tech", "software", "ai", "data",
    "design", "ux", "saas", "b2b", "linkedin", "network", "mentor",
    "intern", "build", "launch", "scale", "grow", "idea", "strategy",
    "industry", "innovation",
)

OFF_TOPIC_KEYWORDS: tuple[str, ...] = (
    "recipe",
    "weather",
    "movie",
    "song",
    "lyrics",
    "anime",
    "manga",
    "game",
    "cheat code",
    "minecraft",
    "fortnite",
    "gta",
    "pokemon",
    "cricket score",
    "football score",
    "horoscope",
    "zodiac",
    "astrology",
    "boyfriend",
    "girlfriend",
    "dating",
    "tinder",
    "crush",
    "love letter",
    "homework",
    "exam answer",
    "momos",
    "pizza recipe",
    "biryani",
    "cake recipe",
    "tikka masala",
    "instagram caption",
    "tiktok",
    "snapchat",
    "meme",
    "joke tell",
    "tell me a joke",
    "story time",
    "fairy tale",
    "bedtime story",
    "rap song",
    "poem about love",
    "dear diary",
)

# Pure coding requests, not "how I used Python at work".
CODE_REQUEST_PATTERNS: tuple[str, ...] = (
    r"\b(?:python|javascript|java|c\+\+|ruby|golang|rust|php|html|css)\b"
    r".*\b(?:code|program|function|script|bug|error|syntax)\b",
    r"\bwrite (?:a |me )?(?:code|script|program|function|class|api)\b",
    r"\b(?:debug|compile|runtime|stack overflow|segfault|npm install)\b",
)

# Start-anchored only, so plurals and suffixes still match ("founders").
AUDIENCE_ROLE_PATTERNS: tuple[str, ...] = (
    "developer", "engineer", "founder", "ceo", "cto", "cfo", "cmo",
    "manager", "director", "lead", "designer", "marketer", "analyst",
    "consultant", "recruiter", "freelancer", "entrepreneur", "executive",
    "professional", "student", "intern", "hr", "sales", "product",
    "project", "coach", "mentor", "teacher", "writer", "creator",
    "influencer", "investor", "partner", "vp", "head of", "team", "staff",
    "people", "community", "audience", "leader", "architect", "scientist",
    "researcher", "specialist", "strategist", "advisor", "owner",
    "operator", "startup", "saas", "b2b", "b2c", "tech", "software", "ai",
    "data", "cloud", "fintech", "health", "edtech", "ecommerce", "agency",
    "enterprise", "smb", "small business", "senior", "junior",
    r"mid[- ]?level", r"entry[- ]?level", "marketing", "finance",
    "accounting", "legal", "medical", "nursing", "pharma", "biotech",
    "crypto", "web3", "blockchain", "mobile", "frontend", "backend",
    "fullstack", r"full[- ]?stack", "devops", "sre", "qa", "tester",
    "security", "infosec", "support", "success", "operations",
    "logistics", "supply chain", "manufacturing", "retail", "hospitality",
    "real estate", "media", "content", "seo", "growth", "brand", "vc",
    "angel", "pe", "private equity", r"non[- ]?profit", "ngo",
    "government", "public sector", "education", "academia", "faculty",
)

AUDIENCE_COLLECTIVE_TERMS: tuple[str, ...] = (
    "people", "anyone", "those", "professionals", "leaders", "teams",
    "workers", "employees", "colleagues", "individuals", "beginners",
    "experts", "newcomers", "veterans", "aspirants", "enthusiasts",
    "practitioners", "graduates", "alumni", "candidates", "job seekers",
    "hiring managers",
)

AUDIENCE_RELATIONAL_PATTERN = (
    r"\w+\s+(?:who|in|at|from|working|looking|interested|building|"
    r"running|managing|leading)\s+"
)


DEFAULT_VOCABULARY = Vocabulary(
    keyboard_fragments=KEYBOARD_FRAGMENTS,
    profanity_terms=PROFANITY_TERMS,
    injection_triggers=INJECTION_TRIGGERS,
    question_patterns=QUESTION_PATTERNS,
    linkedin_exempt_terms=LINKEDIN_EXEMPT_TERMS,
    off_topic_keywords=OFF_TOPIC_KEYWORDS,
    code_request_patterns=CODE_REQUEST_PATTERNS,
    audience_role_patterns=AUDIENCE_ROLE_PATTERNS,
    audience_collective_terms=AUDIENCE_COLLECTIVE_TERMS,
    audience_relational_pattern=AUDIENCE_RELATIONAL_PATTERN,
)

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from learning_assistant.prompts import SUGGESTION_QUESTION

# Keyword -> career paths. Matched case-insensitively against the words of a trend topic.
DEFAULT_CAREER_PATHS: dict[str, tuple[str, ...]] = {
    "machine": ("Machine Learning Engineer", "Data Scientist", "AI Research Scientist"),
    "learning": ("Machine Learning Engineer", "Data Scientist", "Learning Experience Designer"),
    "data": ("Data Analyst", "Data Engineer", "Data Scientist"),
    "python": ("Backend Developer", "Data Engineer", "Automation Engineer"),
    "web": ("Frontend Developer", "Full Stack Developer", "UX Engineer"),
    "design": ("UI/UX Designer", "Product Designer", "Graphic Designer"),
    "security": ("Security Analyst", "Penetration Tester", "Cloud Security Engineer"),
    "cloud": ("Cloud Engineer", "DevOps Engineer", "Site Reliability Engineer"),
    "biology": ("Research Scientist", "Biotechnologist", "Healthcare Data Analyst"),
    "finance": ("Financial Analyst", "Quantitative Analyst", "Accountant"),
}

FALLBACK_CAREER_PATHS: tuple[str, ...] = ("Subject Matter Specialist", "Educator", "Researcher")


@dataclass(frozen=True)
class SuggestionPrompt:
    topic: str
    career_paths: tuple[str, ...]
    question: str = SUGGESTION_QUESTION


class CareerCatalog:
    def __init__(
        self,
        paths: Mapping[str, tuple[str, ...]] | None = None,
        *,
        fallback: tuple[str, ...] = FALLBACK_CAREER_PATHS,
        max_paths: int = 4,
    ) -> None:
        self._paths = {k.lower(): tuple(v) for k, v in (paths or DEFAULT_CAREER_PATHS).items()}
        self.fallback = tuple(fallback)
        self.max_paths = max_paths

    def paths_for(self, topic: str) -> tuple[str, ...]:
        out: list[str] = []
        for word in (topic or "").lower().split():
            for path in self._paths.get(word, ()):
                if path not in out:
                    out.append(path)
        return tuple(out[: self.max_paths]) if out else self.fallback

    def suggestion_for(self, topic: str) -> SuggestionPrompt:
        return SuggestionPrompt(topic=topic, career_paths=self.paths_for(topic))

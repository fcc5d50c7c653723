"""Monitoring configuration for the application."""
from prometheus_client import Counter, Histogram, start_http_server

# Search metrics
searches = Counter(
    "hanzitype_searches_total",
    "Total number of dictionary lookups issued",
)

search_errors = Counter(
    "hanzitype_search_errors_total",
    "Total number of dictionary lookups that failed",
)

# Word list metrics
cards_added = Counter(
    "hanzitype_cards_added_total",
    "Total number of words added to personal lists",
    ["mode"],
)

cards_removed = Counter(
    "hanzitype_cards_removed_total",
    "Total number of words removed from personal lists",
    ["mode"],
)

# Game metrics
games_started = Counter(
    "hanzitype_games_started_total",
    "Total number of typing games started",
)

correct_answers = Counter(
    "hanzitype_correct_answers_total",
    "Total number of correct answers typed",
)

game_rate = Histogram(
    "hanzitype_game_rate_words_per_minute",
    "Words per minute at the end of a game",
    buckets=[1, 5, 10, 20, 30, 45, 60],
)

# Error metrics
collaborator_errors = Counter(
    "hanzitype_collaborator_errors_total",
    "Total number of failed backend calls",
    ["operation"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)

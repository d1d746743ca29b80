# src/taskearn/tasks/fixtures.py

"""
Bundled task sets used when the backend and the cache both come up empty.

BUNDLED_TASKS plays the role of the local task file shipped with the app;
SURVEY tasks are always served from it (ids in SURVEY_ID_RANGE).
"""

from __future__ import annotations

from typing import Any

from .normalizer import normalize_tasks
from .task_models import ProjectType, Task

SURVEY_ID_RANGE = range(100, 200)

_FIXTURE_CREATED_AT = "2025-04-18T12:58:14.379Z"


def _opts(*values: tuple[str, str]) -> list[dict[str, str]]:
    return [{"id": v, "text": text, "value": v} for v, text in values]


IMAGE_FIXTURES: tuple[dict[str, Any], ...] = (
    {
        "id": 1001,
        "data": {
            "image": "https://placehold.co/600x400/6C5DD3/FFFFFF.png?text=Classification+Task+1",
            "title": "Image Classification Demo",
            "question": "What object is shown in this image?",
            "options": _opts(("cat", "Cat"), ("dog", "Dog"), ("bird", "Bird"), ("other", "Other")),
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
    {
        "id": 1002,
        "data": {
            "image": "https://placehold.co/600x400/FF6A3D/FFFFFF.png?text=Classification+Task+2",
            "title": "Indoor or Outdoor?",
            "question": "Is this scene indoors or outdoors?",
            "options": _opts(("indoor", "Indoor"), ("outdoor", "Outdoor"), ("unclear", "Unclear")),
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
    {
        "id": 1003,
        "data": {
            "image": "https://placehold.co/600x400/00C4B4/FFFFFF.png?text=Classification+Task+3",
            "title": "Color Identification",
            "question": "What is the primary color in this image?",
            "options": _opts(
                ("red", "Red"), ("blue", "Blue"), ("green", "Green"), ("yellow", "Yellow"), ("other", "Other")
            ),
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
)

AUDIO_FIXTURES: tuple[dict[str, Any], ...] = (
    {
        "id": 22,
        "data": {
            "audio": "https://file-examples.com/storage/fe8c7eef0c6364f6c9d96b3/2017/11/file_example_MP3_700KB.mp3",
            "question": "What type of sound is this?",
            "options": _opts(
                ("alarm", "Alarm"), ("notification", "Notification"), ("ringtone", "Ringtone"), ("other", "Other")
            ),
        },
        "created_at": "2025-04-18T12:58:14.379Z",
    },
    {
        "id": 23,
        "data": {
            "audio": "https://file-examples.com/storage/fe8c7eef0c6364f6c9d96b3/2017/11/file_example_MP3_1MG.mp3",
            "question": "What environment does this sound represent?",
            "options": _opts(("nature", "Nature"), ("urban", "Urban"), ("indoor", "Indoor"), ("other", "Other")),
        },
        "created_at": "2025-04-18T12:58:14.387Z",
    },
    {
        "id": 24,
        "data": {
            "audio": "https://file-examples.com/storage/fe8c7eef0c6364f6c9d96b3/2017/11/file_example_MP3_2MG.mp3",
            "question": "What type of vehicle is making this sound?",
            "options": _opts(("car", "Car"), ("motorcycle", "Motorcycle"), ("truck", "Truck"), ("other", "Other")),
        },
        "created_at": "2025-04-18T12:58:14.387Z",
    },
)

_SENTIMENT = _opts(("positive", "Positive"), ("neutral", "Neutral"), ("negative", "Negative"))

TEXT_FIXTURES: tuple[dict[str, Any], ...] = (
    {
        "id": 3001,
        "data": {
            "text": "I absolutely love this product! It has made my life so much easier.",
            "title": "Product Review",
            "question": "What is the sentiment of this review?",
            "options": _SENTIMENT,
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
    {
        "id": 3002,
        "data": {
            "text": "The service was okay, nothing special but it did the job.",
            "title": "Service Feedback",
            "question": "What is the sentiment of this feedback?",
            "options": _SENTIMENT,
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
    {
        "id": 3003,
        "data": {
            "text": "I'm very disappointed with the quality. Would not recommend.",
            "title": "Customer Comment",
            "question": "What is the sentiment of this comment?",
            "options": _SENTIMENT,
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
)

GEO_FIXTURES: tuple[dict[str, Any], ...] = (
    {
        "id": 4001,
        "data": {
            "image": "https://placehold.co/800x600/5CDBF2/FFFFFF.png?text=Map+1",
            "title": "Land Cover Classification",
            "question": "What is the primary land cover type in this area?",
            "options": _opts(
                ("forest", "Forest"), ("urban", "Urban"), ("agriculture", "Agriculture"),
                ("water", "Water"), ("other", "Other"),
            ),
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
    {
        "id": 4002,
        "data": {
            "image": "https://placehold.co/800x600/F986E5/FFFFFF.png?text=Map+2",
            "title": "Building Identification",
            "question": "How many buildings can you identify in this image?",
            "options": _opts(("none", "None"), ("few", "1-5"), ("many", "6-20"), ("numerous", "More than 20")),
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
)

# Served for project types without a dedicated set.
DEFAULT_FIXTURES: tuple[dict[str, Any], ...] = (
    {
        "id": 9001,
        "data": {
            "title": "Getting Started",
            "question": "Are you ready to start labeling?",
            "options": _opts(("yes", "Yes"), ("no", "No")),
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
)

_GEO_FEATURES = _opts(("building", "Buildings"), ("road", "Roads"), ("water", "Water"), ("vegetation", "Vegetation"))

BUNDLED_TASKS: tuple[dict[str, Any], ...] = (
    {
        "id": 28,
        "data": {
            "map_image": "https://images.unsplash.com/photo-1500382017468-9049fed747ef?auto=format&fit=crop&w=1024&q=80",
            "location_name": "Agricultural Land",
            "question": "What is the most prominent feature in this map?",
            "options": _GEO_FEATURES,
        },
    },
    {
        "id": 29,
        "data": {
            "map_image": "https://images.unsplash.com/photo-1454496522488-7a8e488e8606?auto=format&fit=crop&w=1024&q=80",
            "location_name": "Mountain Region",
            "question": "What is the most prominent feature in this map?",
            "options": _GEO_FEATURES,
        },
    },
    {
        "id": 101,
        "data": {
            "title": "App Usage Survey",
            "question": "How often do you use the app?",
            "options": _opts(("daily", "Daily"), ("weekly", "Weekly"), ("monthly", "Monthly"), ("rarely", "Rarely")),
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
    {
        "id": 102,
        "data": {
            "title": "Feature Feedback",
            "question": "Which feature of the app do you find most useful?",
            "options": _opts(
                ("image_tasks", "Image Classification"),
                ("audio_tasks", "Audio Classification"),
                ("text_tasks", "Text Sentiment"),
                ("geo_tasks", "Geospatial Labeling"),
            ),
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
    {
        "id": 103,
        "data": {
            "title": "Recommendation",
            "question": "How likely are you to recommend our service?",
            "description": "Based on your experience, would you recommend our service to others?",
            "options": _opts(("very_likely", "Very Likely"), ("somewhat_likely", "Somewhat Likely"), ("not_likely", "Not Likely")),
        },
        "created_at": _FIXTURE_CREATED_AT,
    },
    {
        "id": 201,
        "data": {
            "text": "I love this product! It works exactly as described and the customer service was excellent.",
            "question": "What is the sentiment of this review?",
            "options": _SENTIMENT,
        },
    },
)

_STATIC_SETS: dict[ProjectType, tuple[dict[str, Any], ...]] = {
    ProjectType.IMAGE_CLASSIFICATION: IMAGE_FIXTURES,
    ProjectType.AUDIO_CLASSIFICATION: AUDIO_FIXTURES,
    ProjectType.TEXT_SENTIMENT: TEXT_FIXTURES,
    ProjectType.GEOSPATIAL_LABELING: GEO_FIXTURES,
}


def static_fixtures(project_type: ProjectType | str) -> list[Task]:
    pt = ProjectType.parse(project_type)
    return normalize_tasks(_STATIC_SETS.get(pt, DEFAULT_FIXTURES), pt)


def survey_tasks() -> list[Task]:
    """SURVEY tasks from the bundled set (ids in SURVEY_ID_RANGE)."""
    in_range = [t for t in BUNDLED_TASKS if t["id"] in SURVEY_ID_RANGE]
    return normalize_tasks(in_range, ProjectType.SURVEY)

"""Keyword-based activity detection for uploaded photos."""

import random

from fitlog.models.tracking import ActivityAnalysis, Category


WORKOUT_ACTIVITIES = [
    "strength training",
    "cardio",
    "yoga",
    "running",
    "cycling",
    "swimming",
    "weightlifting",
    "hiit",
]

MEAL_CATEGORIES = [
    "breakfast",
    "lunch",
    "dinner",
    "snack",
    "protein",
    "vegetables",
    "fruits",
    "healthy meal",
]

WORKOUT_SUGGESTIONS = [
    "Great job staying active! Consistency is key to reaching your fitness goals.",
    "Consider tracking your sets, reps, and weights for better progress monitoring.",
    "Don't forget to stay hydrated and get adequate rest for recovery.",
]

MEAL_SUGGESTIONS = [
    "Excellent nutrition tracking! Consistent logging helps build healthy habits.",
    "Try to include a variety of colorful fruits and vegetables for optimal nutrition.",
    "Remember to stay hydrated throughout the day for better health.",
]


def detect_label(category: Category, title: str, description: str = "") -> str:
    """First keyword found in the title or description, capitalised."""
    keywords = WORKOUT_ACTIVITIES if category == "workout" else MEAL_CATEGORIES
    title = title.lower()
    description = description.lower()

    for keyword in keywords:
        if keyword in title or keyword in description:
            return keyword[0].upper() + keyword[1:]

    return "Exercise Session" if category == "workout" else "Meal"


def analyze_activity(category: Category, title: str, description: str = "") -> ActivityAnalysis:
    """Label plus canned suggestions for a new log."""
    suggestions = WORKOUT_SUGGESTIONS if category == "workout" else MEAL_SUGGESTIONS
    return ActivityAnalysis(
        detected_label=detect_label(category, title, description),
        confidence=min(round(0.7 + random.random() * 0.3, 2), 0.99),
        suggestions=suggestions[:2],
    )

"""
Waylo: AI trip planner powered by Google Gemini.

This package turns trip parameters into a day-by-day itinerary and a
packing list, offers a chat assistant over the itinerary, gates
generated content for free accounts and stores saved trips in DynamoDB.
"""

__version__ = "0.1.0"

from langchain_core.prompts import ChatPromptTemplate

SYSTEM_MESSAGE = "You are a professional travel planner. Always respond with valid JSON only."

itinerary_prompt = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_MESSAGE),
    ("human", """
You are a professional travel planner. Create a detailed {duration_days}-day itinerary for {destination}.

Please return ONLY a valid JSON object with the following structure (no additional text or formatting):

{{
  "itinerary": [
    {{
      "day": 1,
      "theme": "Theme for the day (e.g., 'Historical Paris', 'Modern Tokyo')",
      "activities": [
        {{
          "time": "Morning",
          "description": "Detailed activity description with practical tips",
          "location": "Specific location name"
        }},
        {{
          "time": "Afternoon",
          "description": "Detailed activity description with practical tips",
          "location": "Specific location name"
        }},
        {{
          "time": "Evening",
          "description": "Detailed activity description with practical tips",
          "location": "Specific location name"
        }}
      ]
    }}
  ]
}}

Requirements:
- Return exactly {duration_days} days, numbered 1 to {duration_days}
- Include exactly 3 activities per day ({time_slots})
- Provide specific, practical descriptions with insider tips
- Include exact location names
- Make activities realistic for the time of day
- Consider local culture and must-see attractions
- Ensure activities flow logically throughout the day
- Include practical tips like "pre-book tickets" or "best time to visit"

Return ONLY the JSON object, no other text.
"""),
])

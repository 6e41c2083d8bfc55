# farm_assistant/common/templates.py
"""
Prompt templates and fixed user-facing sentences.
Prompts are filled with explicit values by the caller; nothing here reads
settings on its own.
"""

REFUSAL_SENTENCE = (
    "Your request is not related to farming or agriculture. "
    "I'm designed to help with agricultural topics only."
)

CHAT_WELCOME = (
    "Welcome to FarmAssistant AI Chat! I'm here to help with your farming and "
    "gardening questions. How can I assist you today?"
)

IDENTIFY_WELCOME = (
    "Welcome to AIdentify! Upload or take a photo of your crops, and I'll help "
    "identify plants, pests, or diseases."
)

HEALTHY_MESSAGE = (
    "No disease or pests were identified in the image. The plant appears to be healthy."
)

NO_PLANT_MESSAGE = (
    "No plants or agricultural elements were detected in this image. "
    "Please upload a clear image of a plant, pest, or disease."
)

HEALTHY_MARKER = "No disease or pests were identified in the image"

DEFAULT_IDENTIFY_PROMPT = "Identify what's in this image"


def request_error_message(detail: str) -> str:
    return f"Sorry, I encountered an error processing your request: {detail}. Please try again."


def image_error_message(detail: str) -> str:
    return (
        f"Sorry, I encountered an error processing your image: {detail}. "
        "Please try again with a clearer image."
    )


CHAT_PROMPT = """You are an agricultural assistant for a farming app called FarmAssistant. First, determine if the user's question is related to farming, agriculture, gardening, or any related agricultural topics. If it is NOT related to agriculture, respond with EXACTLY: "{refusal}" and nothing else.

If the question IS related to agriculture, answer it in a helpful, accurate, and detailed way. Provide specific, actionable advice when possible. The user is located in {country}, so tailor your advice to that region's climate, growing conditions, and available resources. Format your response in a professional, concise manner without excessive paragraphs. Avoid using asterisks for emphasis. If you don't know the answer, suggest resources or alternative approaches. Here is the user's question: {question}"""


IDENTIFICATION_PROMPT = """{prompt}. Analyze this image and identify any plant, pest, or disease. If no issues are found, respond with EXACTLY "{healthy_marker}." followed by a brief description of the healthy plant.

If a pest or disease is identified, provide a detailed analysis in the following format:

1. Name: The identified pest or disease name
2. Type: Whether it's a pest or disease
3. Confidence: Your confidence level in the identification (as a percentage)
4. Description: A brief description of the pest or disease in 1-2 sentences
5. Causes: List 2-3 main causes or conditions that lead to this pest or disease
6. Control Methods:
   a. Chemical Control: For each chemical control option (limit to at least 2), provide:
      - Name of the chemical/product
      - Active Ingredient (format as: "Active ingredient 25 g/L EC")
      - Application Rate (e.g., "1 ml/L water")
      - At least two specific brand names available in {country}
   b. Organic Control: For each organic control option (limit to 1), provide:
      - Name of the organic solution
      - Active Ingredient
      - Application Rate
   c. Cultural Control: List 3-5 cultural practices to prevent or manage the issue
7. Plants Affected: List of crops commonly affected by this pest or disease (limit to 5)

Keep your response concise and focused on the most important information. Format it to be easily read by farmers."""


def build_chat_prompt(question: str, country: str) -> str:
    return CHAT_PROMPT.format(refusal=REFUSAL_SENTENCE, country=country, question=question)


def build_identification_prompt(prompt: str, country: str) -> str:
    return IDENTIFICATION_PROMPT.format(
        prompt=(prompt or DEFAULT_IDENTIFY_PROMPT).rstrip("."),
        healthy_marker=HEALTHY_MARKER,
        country=country,
    )

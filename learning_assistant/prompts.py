GREETING = "Hello! I'm your AI learning assistant. How can I help you today?"


INSTRUCTION = (
    "You are a helpful AI learning assistant for ThinkSpark educational platform. "
    "Provide concise, accurate, and detailed answers to help students learn. "
    "Please provide a detailed answer of at least 7-8 lines."
)


DEGRADED_REPLY = "Partial response: The AI response was brief due to timeout."


INFERENCE_FAILED_NOTICE = "Failed to get response. Please try again."

SPEECH_ERROR_NOTICE = "Speech recognition error. Please try again."

SPEECH_UNSUPPORTED_NOTICE = "Speech recognition is not supported in this browser."


SUGGESTION_QUESTION = "Do you want to build a resume for this path?"

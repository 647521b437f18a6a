import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

# LLM used for advisory insights (OpenAI-compatible chat completions)
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "http://host.docker.internal:11434/v1")
LLM_MODEL = os.getenv("LLM_MODEL", "mistral:7b-instruct")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.2"))
INSIGHTS_TIMEOUT_SECONDS = float(os.getenv("INSIGHTS_TIMEOUT_SECONDS", "60"))

# Hotspot thresholds, as multiples of the average degree
HOTSPOT_MULTIPLIER = float(os.getenv("HOTSPOT_MULTIPLIER", "2"))
HIGH_RISK_MULTIPLIER = float(os.getenv("HIGH_RISK_MULTIPLIER", "3"))

MAX_REPORTED_CYCLES = int(os.getenv("MAX_REPORTED_CYCLES", "5"))

# Circular layout canvas
LAYOUT_RADIUS = float(os.getenv("LAYOUT_RADIUS", "150"))
LAYOUT_CENTER_X = float(os.getenv("LAYOUT_CENTER_X", "300"))
LAYOUT_CENTER_Y = float(os.getenv("LAYOUT_CENTER_Y", "200"))

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./dependency_graphs.db")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

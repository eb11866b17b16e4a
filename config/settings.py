import os
import sys
from typing import Optional
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")
    HOST: str = Field(default="127.0.0.1", validation_alias="HOST")
    PORT: int = Field(default=8000, validation_alias="PORT")

    # CORS
    CORS_ALLOW_ORIGIN: str = Field(default="*", validation_alias="CORS_ALLOW_ORIGIN")
    CORS_ALLOW_HEADERS: str = Field(
        default="authorization, x-client-info, apikey, content-type",
        validation_alias="CORS_ALLOW_HEADERS",
    )

    # Inbound rate limiting (Redis-backed, off unless enabled)
    RATE_LIMIT_ENABLED: bool = Field(default=False, validation_alias="RATE_LIMIT_ENABLED")
    RATE_LIMIT_TIMES: int = Field(default=30, validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(default=60, validation_alias="RATE_LIMIT_SECONDS")
    REDIS_URL: str = Field(default="redis://localhost:6379/0", validation_alias="REDIS_URL")
    TRUST_PROXY: bool = Field(default=False, validation_alias="TRUST_PROXY")

    # AI Gateway Settings
    AI_GATEWAY_URL: str = Field(
        default="https://ai.gateway.lovable.dev/v1/chat/completions",
        validation_alias="AI_GATEWAY_URL",
    )
    AI_GATEWAY_MODEL: str = Field(
        default="google/gemini-3-flash-preview", validation_alias="AI_GATEWAY_MODEL"
    )
    AI_GATEWAY_API_KEY: Optional[str] = Field(
        default=None, validation_alias="AI_GATEWAY_API_KEY"
    )
    AI_GATEWAY_TIMEOUT_SECONDS: float = Field(
        default=60.0, validation_alias="AI_GATEWAY_TIMEOUT_SECONDS"
    )
    AI_GATEWAY_MAX_RETRIES: int = Field(
        default=0, ge=0, le=5, validation_alias="AI_GATEWAY_MAX_RETRIES"
    )

    # Logging knobs
    LOGGER_NAME: str = "esg-claim-analyzer"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")
    LOG_PREVIEW_CHARS: int = Field(default=200, validation_alias="LOG_PREVIEW_CHARS")

    # Prompts
    ANALYZE_CLAIM_SYSTEM_PROMPT: str = (
        "You are an ESG (Environmental, Social, Governance) claim analysis expert for the "
        "PHAROS-INTEGRITY platform. Your job is to analyze corporate sustainability claims and identify:\n"
        "\n"
        "1. **Claim Type**: Categorize the claim (e.g., Carbon Emissions, Renewable Energy, Water "
        "Conservation, Biodiversity, Supply Chain, Social Impact, Governance)\n"
        "2. **Specificity Score** (1-10): How specific and measurable is the claim? Vague promises get low scores.\n"
        "3. **Verifiability Score** (1-10): Can this claim be verified with satellite data, public records, "
        "or third-party audits?\n"
        "4. **Key Metrics**: Extract any quantifiable targets or metrics mentioned\n"
        "5. **Red Flags**: Identify potential greenwashing indicators or vague language\n"
        "6. **Verification Approach**: Suggest data sources to verify (satellite imagery, regulatory filings, etc.)\n"
        "7. **Risk Level**: Low, Medium, or High risk of being misleading\n"
        "8. **Summary**: A short plain-language summary of your assessment\n"
        "\n"
        "Be concise and actionable. Focus on what can be verified."
    )

    ANALYZE_CLAIMS_SYSTEM_PROMPT: str = (
        "You are an ESG (Environmental, Social, Governance) claim analysis expert for the "
        "PHAROS-INTEGRITY platform. You analyze multiple corporate sustainability claims and identify "
        "relationships between them.\n"
        "\n"
        "For EACH claim, analyze:\n"
        "1. **Claim Type**: Categorize (Carbon Emissions, Renewable Energy, Water Conservation, "
        "Biodiversity, Supply Chain, Social Impact, Governance)\n"
        "2. **Specificity Score** (1-10): How specific and measurable?\n"
        "3. **Verifiability Score** (1-10): Can be verified with data?\n"
        "4. **Key Metrics**: Quantifiable targets mentioned\n"
        "5. **Red Flags**: Greenwashing indicators or vague language\n"
        "6. **Risk Level**: Low, Medium, or High\n"
        "\n"
        "For the OVERALL REPORT, analyze claim relationships:\n"
        '- **Contradictions**: Claims that conflict with each other (e.g., "100% renewable by 2025" vs '
        '"expanding coal operations")\n'
        "- **Supporting**: Claims that reinforce each other\n"
        "- **Duplicates**: Claims making essentially the same point\n"
        "- **Inconsistencies**: Timeline or scope mismatches\n"
        "\n"
        "Always reference claims by the exact ID given to you. "
        "Be concise and actionable. Focus on cross-claim analysis."
    )


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)

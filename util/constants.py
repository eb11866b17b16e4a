from typing import Final


class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    HEALTHZ = "/healthz"
    ANALYZE_CLAIM = V1 + "/analyze-claim"
    ANALYZE_CLAIMS = V1 + "/analyze-claims"


class Defaults:
    COMPANY_NAME: Final[str] = "Unknown Company"
    SECTOR: Final[str] = "Unknown Sector"
    CLAIM_ID_PREFIX: Final[str] = "claim-"


class Fallback:
    CLAIM_TYPE: Final[str] = "Unknown"
    SCORE: Final[int] = 5
    RED_FLAG: Final[str] = "Unable to fully parse claim"
    VERIFICATION_APPROACH: Final[str] = "Manual review recommended"
    SUMMARY: Final[str] = "Analysis could not be completed."
    REPORT_SUMMARY: Final[str] = (
        "Analysis could not be fully completed. Manual review recommended."
    )


ANALYSIS_RESULT_HEADER: Final[str] = "X-Analysis-Result"

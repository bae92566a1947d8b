from datetime import datetime, timezone

def health_payload(service: str, status: str = "healthy") -> dict:
    return {
        "status": status,
        "service": service,
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
    }

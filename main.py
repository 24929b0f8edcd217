"""MediSchedule Pro - development server entry point."""

import uvicorn

from medischedule.config import settings


if __name__ == "__main__":
    uvicorn.run(
        "medischedule.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )

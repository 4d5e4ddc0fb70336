"""
FitForge Configuration
Load environment variables and define app settings.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "FitForge"
    DEBUG: bool = True
    PORT: int = 5000

    # CORS allow-list sources
    REPLIT_DEV_DOMAIN: str = ""
    REPLIT_DOMAINS: str = ""

    # RapidAPI (muscle images, ExerciseDB, nutrition)
    RAPIDAPI_KEY: str = ""
    MUSCLE_IMAGE_HOST: str = "muscle-group-image-generator.p.rapidapi.com"
    EXERCISEDB_HOST: str = "exercisedb.p.rapidapi.com"
    NUTRITION_HOST: str = "ai-workout-planner-exercise-fitness-nutrition-guide.p.rapidapi.com"
    HTTP_TIMEOUT_SEC: float = 15.0

    # Google Gemini
    GOOGLE_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_VISION_MODEL: str = "gemini-2.0-flash"

    # Strava OAuth
    STRAVA_CLIENT_ID: str = ""
    STRAVA_CLIENT_SECRET: str = ""

    # MongoDB (empty URI keeps saved workouts in memory)
    MONGODB_URI: str = ""
    MONGODB_DB_NAME: str = "fitforge"

    # Remotion rendering
    VIDEO_OUTPUT_DIR: str = "public/videos"
    REMOTION_ENTRY_POINT: str = "server/remotion/index.tsx"
    VIDEO_MAX_AGE_MIN: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def cors_origins(self) -> list[str]:
        """HTTPS origins allowed to call the API."""
        origins = []
        if self.REPLIT_DEV_DOMAIN:
            origins.append(f"https://{self.REPLIT_DEV_DOMAIN}")
        for domain in self.REPLIT_DOMAINS.split(","):
            domain = domain.strip()
            if domain and f"https://{domain}" not in origins:
                origins.append(f"https://{domain}")
        return origins


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Quick access
settings = get_settings()

# ============================================================
# Example .env file (create this in your project root):
# ============================================================
"""
# RapidAPI (ExerciseDB, muscle images, nutrition)
RAPIDAPI_KEY=your_rapidapi_key_here

# Google Gemini
GOOGLE_API_KEY=your_google_api_key_here

# Strava
STRAVA_CLIENT_ID=12345
STRAVA_CLIENT_SECRET=your_strava_secret

# Optional: persist saved workouts
MONGODB_URI=mongodb+srv://<user>:<password>@cluster.mongodb.net/?retryWrites=true&w=majority
"""

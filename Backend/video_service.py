"""
FitForge Video Service
Renders the WorkoutSummary Remotion composition through the Remotion CLI.
"""
import json
import os
import shutil
import subprocess
import tempfile
import time
import uuid

from config import settings
from models import WorkoutVideoRequest

COMPOSITION_ID = "WorkoutSummary"
RENDER_TIMEOUT_SEC = 600


class VideoRenderError(RuntimeError):
    pass


def output_dir() -> str:
    os.makedirs(settings.VIDEO_OUTPUT_DIR, exist_ok=True)
    return settings.VIDEO_OUTPUT_DIR


def _render_command(props_path: str, output_path: str) -> list[str]:
    npx = shutil.which("npx")
    if not npx:
        raise VideoRenderError("npx not found; install Node.js to render videos")
    return [
        npx, "remotion", "render",
        settings.REMOTION_ENTRY_POINT,
        COMPOSITION_ID,
        output_path,
        f"--props={props_path}",
        "--codec=h264",
    ]


def generate_workout_summary_video(data: WorkoutVideoRequest) -> str:
    """Render a summary video and return its public URL path."""
    video_id = str(uuid.uuid4())
    output_path = os.path.join(output_dir(), f"{video_id}.mp4")
    print(f"[Video] Generating video: {video_id}")

    with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False, encoding="utf-8") as tmp:
        json.dump(data.model_dump(by_alias=True), tmp)
        props_path = tmp.name

    try:
        proc = subprocess.run(
            _render_command(props_path, output_path),
            capture_output=True,
            text=True,
            timeout=RENDER_TIMEOUT_SEC,
        )
    except subprocess.TimeoutExpired:
        raise VideoRenderError("Video render timed out")
    finally:
        os.unlink(props_path)

    if proc.returncode != 0:
        print(f"[Video] Render failed: {proc.stderr[-500:]}")
        raise VideoRenderError(f"Remotion exited with code {proc.returncode}")

    print(f"[Video] Video generated: {output_path}")
    return f"/videos/{video_id}.mp4"


def cleanup_old_videos(max_age_minutes: int = None) -> int:
    """Delete rendered videos older than the max age. Returns the number removed."""
    max_age_minutes = max_age_minutes or settings.VIDEO_MAX_AGE_MIN
    directory = settings.VIDEO_OUTPUT_DIR
    if not os.path.isdir(directory):
        return 0

    cutoff = time.time() - max_age_minutes * 60
    removed = 0
    for name in os.listdir(directory):
        path = os.path.join(directory, name)
        try:
            if os.path.isfile(path) and os.path.getmtime(path) < cutoff:
                os.unlink(path)
                removed += 1
                print(f"[Video] Cleaned up old video: {name}")
        except OSError as e:
            print(f"[Video] Error cleaning up {name}: {e}")
    return removed

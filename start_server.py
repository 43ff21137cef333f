"""
Server start script
"""
import uvicorn
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config.settings import settings

if __name__ == "__main__":
    print("=" * 70)
    print("Starting server...")
    print("=" * 70)
    try:
        uvicorn.run(
            "caseflow.api.main:app",
            host=settings.api_host,
            port=settings.api_port,
            reload=False,
            log_level=settings.log_level.lower()
        )
    except KeyboardInterrupt:
        print("\nServer stopped")
    except Exception as e:
        print(f"\nServer failed to start: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)

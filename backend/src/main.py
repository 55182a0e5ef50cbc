import sys
from pathlib import Path

import uvicorn

# Add the 'src' directory to the Python path
# This allows `python main.py` from backend/src without installing the package.
sys.path.insert(0, str(Path(__file__).resolve().parent))

from datagen.main import app  # noqa: E402

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)

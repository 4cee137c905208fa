import uvicorn

from sekolah.main import app  # noqa: F401


if __name__ == "__main__":
    uvicorn.run("sekolah.main:app", host="0.0.0.0", port=8000)

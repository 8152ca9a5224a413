import logging
import time
from pathlib import Path, PurePosixPath

from sehat.core.config import settings

logger = logging.getLogger(__name__)


def make_blob_key(user_id, original_name: str, now_ms: int | None = None) -> str:
    """
    {user_id}/{epoch_ms}.{ext}
    충돌 방지는 timestamp 해상도에 기대는 관례일 뿐 (같은 ms 업로드는 덮어씀).
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    ext = PurePosixPath(original_name.replace("\\", "/")).suffix[1:].lower()
    if not ext.isalnum() or not ext.isascii():
        ext = "bin"
    return f"{user_id}/{now_ms}.{ext}"


class LocalBlobStore:
    """
    디스크에 파일을 쓰고 /files 아래 공개 URL 을 돌려주는 object storage.
    AI gateway 가 이 URL 로 파일을 가져가므로 BLOB_PUBLIC_BASE_URL 은 외부에서 접근 가능해야 함.
    """

    def __init__(self, root: str | Path, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise ValueError(f"blob key escapes storage root: {key}")
        return path

    def put(self, key: str, data: bytes) -> str:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as f:
            f.write(data)
        return self.public_url(key)

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def key_from_url(self, url: str) -> str | None:
        prefix = self.public_base_url + "/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):]

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if not path.exists():
            return False
        path.unlink()
        return True


def get_blob_store() -> LocalBlobStore:
    return LocalBlobStore(settings.BLOB_STORAGE_DIR, settings.BLOB_PUBLIC_BASE_URL)

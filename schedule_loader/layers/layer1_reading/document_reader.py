"""
일정 문서 리더입니다.
업로드된 스트림이 일반 XML인지 gzip 압축인지 첫 바이트로 판단하고,
다음 단계에서 바로 파싱할 수 있는 바이트 스트림으로 돌려줍니다.
"""

import gzip
import io
import logging
import zlib
from typing import BinaryIO

from schedule_loader.exceptions import MalformedInputError

logger = logging.getLogger(__name__)

PLAIN_XML_MARKER = b"<"


class DocumentReader:
    """압축 여부를 감지하여 일반 XML 바이트 스트림을 돌려주는 리더."""

    def read(self, raw_stream: BinaryIO) -> BinaryIO:
        """
        스트림의 첫 바이트를 확인하고 위치를 되돌린 뒤 알맞게 디코딩합니다.

        Args:
            raw_stream: 업로드된 원본 스트림

        Returns:
            BinaryIO: 처음부터 읽을 수 있는 일반 XML 스트림

        Raises:
            MalformedInputError: 비어있거나 압축 해제에 실패한 경우
        """
        stream = self._ensure_seekable(raw_stream)

        start = stream.tell()
        first_byte = stream.read(1)
        stream.seek(start)

        if not first_byte:
            raise MalformedInputError("빈 문서입니다")

        if first_byte == PLAIN_XML_MARKER:
            logger.debug("[DocumentReader] 일반 XML 문서 감지")
            return stream

        logger.debug("[DocumentReader] 압축된 문서 감지, 압축 해제 시작")
        try:
            with gzip.GzipFile(fileobj=stream, mode="rb") as gz:
                data = gz.read()
        except (OSError, EOFError, zlib.error) as e:
            raise MalformedInputError(
                "문서를 읽을 수 없습니다: XML도 gzip 압축도 아닙니다",
                details={"error": str(e)},
            )

        if not data:
            raise MalformedInputError("압축 해제된 문서가 비어있습니다")

        logger.debug(f"[DocumentReader] 압축 해제 완료: {len(data)} bytes")
        return io.BytesIO(data)

    def read_bytes(self, content: bytes) -> BinaryIO:
        """바이트 데이터를 바로 읽을 때 사용하는 함수."""
        return self.read(io.BytesIO(content))

    def _ensure_seekable(self, raw_stream: BinaryIO) -> BinaryIO:
        """위치를 되돌릴 수 없는 스트림은 메모리에 올려둡니다."""
        seekable = getattr(raw_stream, "seekable", None)
        if seekable is not None and seekable():
            return raw_stream
        return io.BytesIO(raw_stream.read())

import io
import re

from zenith.utils.logger import LogLevel, ZenithLogger


class TestZenithLogger:
    def test_format_without_colors(self):
        logger = ZenithLogger("post", enable_colors=False)

        line = logger.format(LogLevel.SUCCESS, "Post created", "create", post_id=7, author="alice")

        assert re.match(r"^\[\d{2}:\d{2}:\d{2}\.\d{3}\] ", line)
        assert line.endswith("[POST/CREATE] [SUCCESS] Post created | post_id=7, author=alice")
        assert "\033[" not in line

    def test_long_extras_are_truncated(self):
        logger = ZenithLogger("post", enable_colors=False)

        line = logger.format(LogLevel.INFO, "Big", body="x" * 500)

        assert line.endswith("body=" + "x" * 100 + "...")

    def test_dict_extras_are_compact_json(self):
        logger = ZenithLogger("auth", enable_colors=False)

        line = logger.format(LogLevel.DEBUG, "Claims", claims={"sub": "alice", "role": "USER"})

        assert 'claims={"sub":"alice","role":"USER"}' in line

    def test_writes_to_stream(self):
        stream = io.StringIO()
        logger = ZenithLogger("cleanup", enable_colors=False, stream=stream)

        logger.warning("Nothing to do", "RUN")
        logger.section_end("cleanup", success=False)

        output = stream.getvalue().splitlines()
        assert "[CLEANUP/RUN] [WARNING] Nothing to do" in output[0]
        assert "CLEANUP FAILED" in output[1]
        assert output[2].endswith("─" * 60)

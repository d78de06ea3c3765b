"""Unit tests for custom exceptions."""

from easynews.core.exceptions import (
    ClassificationError,
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    EasyNewsError,
    FeedFetchError,
    InputReadError,
    OutputWriteError,
    ServiceError,
)


class TestEasyNewsError:
    """Tests for the base exception."""

    def test_context(self) -> None:
        """Context is kept and extended."""
        error = EasyNewsError("boom", context={"feed": "ERT"}).with_context(items=3)

        assert error.context == {"feed": "ERT", "items": 3}

    def test_to_dict(self) -> None:
        """to_dict names the type, message and context."""
        assert EasyNewsError("boom").to_dict() == {
            "error_type": "EasyNewsError",
            "message": "boom",
            "context": {},
        }


class TestConfigErrors:
    """Tests for configuration errors."""

    def test_config_path(self) -> None:
        error = ConfigError("bad", config_path="config/feeds.yaml")
        assert error.context["config_path"] == "config/feeds.yaml"

    def test_validation_structured(self) -> None:
        """Field and reason build the message."""
        error = ConfigValidationError(field="limit", value=0, reason="must be positive")

        assert str(error) == "Config validation failed for 'limit': must be positive"
        assert error.context["value"] == "0"
        assert isinstance(error, ConfigError)

    def test_validation_simple(self) -> None:
        assert str(ConfigValidationError("plain")) == "plain"
        assert str(ConfigValidationError()) == "Configuration validation failed"

    def test_not_found(self) -> None:
        error = ConfigNotFoundError("feeds", config_path="config/feeds.yaml")

        assert error.config_key == "feeds"
        assert "feeds" in str(error)


class TestServiceErrors:
    """Tests for service errors."""

    def test_feed_fetch(self) -> None:
        error = FeedFetchError("https://www.ertnews.gr/feed", "timeout")

        assert isinstance(error, ServiceError)
        assert error.feed_url == "https://www.ertnews.gr/feed"
        assert error.context["service"] == "rss"
        assert str(error) == "Feed fetch failed: timeout"

    def test_classification(self) -> None:
        error = ClassificationError("bad json", topic_id="abc", stage="parse")

        assert error.stage == "parse"
        assert error.context == {"stage": "parse", "topic_id": "abc", "service": "classifier"}


class TestIOErrors:
    """Tests for artifact read and write errors."""

    def test_output_write(self) -> None:
        error = OutputWriteError("out/news.json", "disk full")
        assert str(error) == "Failed to write out/news.json: disk full"
        assert error.path == "out/news.json"

    def test_input_read(self) -> None:
        assert InputReadError("news.json", "missing").context == {"path": "news.json"}

"""Tests for twitter tag expansion in documents."""

from __future__ import annotations

from pathlib import Path

import pytest

from tweetembed.cache import DiskCache, NullCache
from tweetembed.config import CredentialSource
from tweetembed.exceptions import InvalidArgumentsError, MissingCredentialsError
from tweetembed.renderer import TweetRenderer
from tweetembed.tags import TAG_PATTERN, expand_tags


URL = "https://twitter.com/twitter_user/status/12345"
EMBED = "<div class='embed twitter'><p>tweet html</p></div>"


@pytest.fixture()
def renderer(tmp_path: Path, fake_client, quiet_output) -> TweetRenderer:
    return TweetRenderer(DiskCache(tmp_path / "cache"), client_factory=fake_client)


class TestExpandTags:
    def test_replaces_single_tag(self, renderer, credential_source) -> None:
        text = f"Before\n{{% twitter {URL} %}}\nAfter\n"
        assert expand_tags(text, renderer, credential_source) == f"Before\n{EMBED}\nAfter\n"

    def test_text_without_tags_is_untouched(self, renderer, credential_source, fake_client) -> None:
        text = "# Title\n\n{{ page.title }} and {% include footer.html %}\n"
        assert expand_tags(text, renderer, credential_source) == text
        assert fake_client.opened == 0

    def test_tag_with_options_and_kind(self, renderer, credential_source, fake_client) -> None:
        text = f"{{% twitter oembed {URL} align='right' %}}"
        assert expand_tags(text, renderer, credential_source) == EMBED
        assert fake_client.oembed_calls[0][1] == {"align": "right"}

    def test_whitespace_control_markers(self, renderer, credential_source) -> None:
        assert expand_tags(f"{{%- twitter {URL} -%}}", renderer, credential_source) == EMBED

    def test_repeated_tag_hits_cache(self, renderer, credential_source, fake_client) -> None:
        text = f"{{% twitter {URL} %}} and {{% twitter {URL} %}}"
        assert expand_tags(text, renderer, credential_source) == f"{EMBED} and {EMBED}"
        assert fake_client.status_calls == [12345]

    def test_nocache_tag_always_fetches(
        self, renderer, credential_source, fake_client, tmp_path: Path
    ) -> None:
        text = f"{{% twitternocache {URL} %}}{{% twitternocache {URL} %}}"

        assert expand_tags(text, renderer, credential_source) == EMBED * 2
        assert fake_client.status_calls == [12345, 12345]
        assert list((tmp_path / "cache").iterdir()) == []

    def test_explicit_nocache_renderer(self, renderer, credential_source, fake_client) -> None:
        nocache = TweetRenderer(NullCache(), client_factory=fake_client)
        text = f"{{% twitternocache {URL} %}}"
        assert expand_tags(text, renderer, credential_source, nocache_renderer=nocache) == EMBED

    def test_twitter_prefix_of_other_tag_is_ignored(self, renderer, credential_source) -> None:
        text = f"{{% twitterx {URL} %}}"
        assert expand_tags(text, renderer, credential_source) == text

    def test_invalid_tag_arguments_raise(self, renderer, credential_source) -> None:
        with pytest.raises(InvalidArgumentsError):
            expand_tags("{% twitter not-a-url %}", renderer, credential_source)

    def test_missing_credentials_raise(self, renderer) -> None:
        with pytest.raises(MissingCredentialsError):
            expand_tags(
                f"{{% twitter {URL} %}}", renderer, CredentialSource(store={}, environ={})
            )


class TestTagPattern:
    def test_captures_name_and_arguments(self) -> None:
        match = TAG_PATTERN.search(f"x {{% twitter {URL} align='left' %}} y")
        assert match is not None
        assert match.group(1) == "twitter"
        assert match.group(2).strip() == f"{URL} align='left'"

    def test_spans_lines(self) -> None:
        match = TAG_PATTERN.search(f"{{% twitter\n  {URL}\n%}}")
        assert match is not None
        assert match.group(2).split() == [URL]

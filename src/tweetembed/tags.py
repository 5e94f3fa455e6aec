"""Expansion of ``{% twitter ... %}`` tags inside documents.

Two tags are recognised:

* ``{% twitter <arguments> %}`` -- rendered through the cached renderer.
* ``{% twitternocache <arguments> %}`` -- rendered through a renderer whose
  cache is a :class:`~tweetembed.cache.NullCache`.

Everything outside the tags is left byte-for-byte untouched.
"""

from __future__ import annotations

import re
from typing import Optional

from tweetembed.cache import NullCache
from tweetembed.config import CredentialSource
from tweetembed.output import debug
from tweetembed.renderer import TweetRenderer

TAG_PATTERN = re.compile(r"\{%-?\s*(twitter|twitternocache)\b(.*?)-?%\}", re.DOTALL)

TAG_NAME = "twitter"
NOCACHE_TAG_NAME = "twitternocache"


def expand_tags(
    text: str,
    renderer: TweetRenderer,
    credential_source: CredentialSource,
    nocache_renderer: Optional[TweetRenderer] = None,
) -> str:
    """Replace every twitter tag in *text* with its rendered embed.

    Args:
        text: The document source.
        renderer: Renderer used for ``twitter`` tags.
        credential_source: Passed to every render call.
        nocache_renderer: Renderer used for ``twitternocache`` tags. When
            omitted, one is built with a :class:`~tweetembed.cache.NullCache`
            and the same client factory as *renderer*.

    Returns:
        The expanded document.

    Raises:
        InvalidArgumentsError, MissingCredentialsError: From the first
            offending tag; the document is not partially expanded.
    """
    if nocache_renderer is None:
        nocache_renderer = TweetRenderer(NullCache(), client_factory=renderer.client_factory)

    def _replace(match: re.Match[str]) -> str:
        name, arguments = match.group(1), match.group(2)
        debug(f"Expanding {{% {name} {arguments.strip()} %}}")
        target = nocache_renderer if name == NOCACHE_TAG_NAME else renderer
        return target.render(arguments, credential_source)

    return TAG_PATTERN.sub(_replace, text)

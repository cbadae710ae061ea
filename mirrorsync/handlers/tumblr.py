# MirrorSync Tumblr Handler
# Expands Tumblr blogs into post files via the v2 API

import functools
import io
import json
import logging
import posixpath
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import urlsplit

import httpx

from mirrorsync.config.schema import TumblrConfig
from mirrorsync.errors import TumblrAPIError
from mirrorsync.handlers.base import Handler
from mirrorsync.sync.entry import Container, Leaf, Locator
from mirrorsync.sync.expansion import ExpansionSink

logger = logging.getLogger(__name__)

POSTS_ENDPOINT = "/v2/blog/{blog}/posts"

# Post types with no downloadable representation yet
SKIPPED_POST_TYPES = frozenset({"answer", "audio", "chat", "video"})


class TumblrHandler(Handler):
    """
    Handler for Tumblr blogs.

    The API root expands into one container per configured blog; a blog
    container expands into one metadata file per post plus the post's
    content, depending on its type.
    """

    name = "tumblr"

    def __init__(self, config: TumblrConfig, client: Optional[httpx.Client] = None):
        """
        Initialize handler.

        Args:
            config: Tumblr settings (API host, key, blogs, paging).
            client: Optional preconfigured httpx client.
        """
        self.config = config
        self._client = client

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.config.api_host,
                timeout=httpx.Timeout(self.config.timeout),
                follow_redirects=True,
            )
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def describe(self) -> str:
        blogs = ", ".join(self.config.blogs) or "no blogs configured"
        return f"tumblr blogs ({blogs})"

    def expand(self, entry: Container, sink: ExpansionSink) -> None:
        blog = entry.locator.path.strip("/")
        if not blog:
            self._expand_root(entry, sink)
        else:
            self._expand_blog(entry, blog, sink)

    def _expand_root(self, entry: Container, sink: ExpansionSink) -> None:
        if not self.config.blogs:
            sink.put_error(TumblrAPIError("No Tumblr blogs configured", locator=str(entry.locator)))
            return
        for blog in self.config.blogs:
            sink.put_child(Container(entry.locator.child(blog)))

    def _expand_blog(self, entry: Container, blog: str, sink: ExpansionSink) -> None:
        offset = 0
        while True:
            try:
                payload = self.get_posts(blog, offset)
            except TumblrAPIError as e:
                sink.put_error(e)
                return

            posts = payload.get("posts") or []
            total = int((payload.get("blog") or {}).get("posts") or payload.get("total_posts") or 0)
            logger.debug("%s: %d post(s) at offset %d of %d", blog, len(posts), offset, total)

            for post in posts:
                try:
                    for leaf in self.post_leaves(entry.locator, post):
                        sink.put_child(leaf)
                except TumblrAPIError as e:
                    sink.put_error(e)
                    return

            offset += len(posts)
            if not posts or offset >= total:
                return

    def get_posts(self, blog: str, offset: int) -> dict[str, Any]:
        """
        Fetch one page of posts.

        Args:
            blog: Blog identifier, e.g. "staff" or "staff.tumblr.com".
            offset: Index of the first post to fetch.

        Returns:
            The "response" object of the API envelope.

        Raises:
            TumblrAPIError: On network, HTTP or payload errors.
        """
        endpoint = POSTS_ENDPOINT.format(blog=blog)
        params = {
            "api_key": self.config.api_key,
            "filter": "raw",
            "offset": offset,
            "limit": self.config.page_size,
        }
        try:
            response = self._get_client().get(endpoint, params=params)
            response.raise_for_status()
            envelope = response.json()
        except httpx.HTTPStatusError as e:
            raise TumblrAPIError(
                f"Request for {blog} failed: {e.response.status_code} {e.response.reason_phrase}",
                locator=blog,
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise TumblrAPIError(f"Network error for {blog}: {e}", locator=blog) from e
        except ValueError as e:
            raise TumblrAPIError(f"Invalid JSON response for {blog}", locator=blog) from e

        result = envelope.get("response") if isinstance(envelope, dict) else None
        if not isinstance(result, dict):
            raise TumblrAPIError(f"Unexpected response for {blog}: {envelope!r}", locator=blog)
        return result

    def post_leaves(self, base: Locator, post: dict[str, Any]) -> Iterator[Leaf]:
        """
        Turn one post into leaves.

        Always yields the post's metadata first, then its content.

        Raises:
            TumblrAPIError: If the post is malformed or of an unknown type.
        """
        try:
            post_id = str(post["id"])
            modified_at = datetime.fromtimestamp(int(post["timestamp"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as e:
            raise TumblrAPIError(f"Malformed post in {base}: {e}", locator=str(base)) from e

        metadata = json.dumps(post, indent=2, ensure_ascii=False).encode("utf-8")
        yield _text_leaf(base.child(f".{post_id}.json"), modified_at, metadata)

        post_type = post.get("type")
        if post_type in SKIPPED_POST_TYPES:
            return
        if post_type == "text":
            yield _text_leaf(base.child(f"{post_id}.md"), modified_at, post.get("body") or "")
        elif post_type == "quote":
            yield _text_leaf(base.child(f"{post_id}_quote.txt"), modified_at, post.get("text") or "")
        elif post_type == "link":
            yield _text_leaf(base.child(f"{post_id}_link.txt"), modified_at, post.get("url") or "")
        elif post_type == "photo":
            for index, photo in enumerate(post.get("photos") or []):
                sizes = photo.get("alt_sizes") or []
                url = sizes[0].get("url") if sizes else (photo.get("original_size") or {}).get("url")
                if not url:
                    continue
                yield Leaf(
                    locator=base.child(f"{post_id}-{index}.{_extension(url)}"),
                    modified_at=modified_at,
                    producer=functools.partial(self.download, url),
                )
        else:
            raise TumblrAPIError(f"Unknown post type {post_type!r} for post {post_id}", locator=str(base))

    def download(self, url: str) -> io.BytesIO:
        """
        Download a media file.

        Raises:
            TumblrAPIError: On network or HTTP errors.
        """
        try:
            response = self._get_client().get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TumblrAPIError(
                f"Download of {url} failed: {e.response.status_code}",
                locator=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise TumblrAPIError(f"Network error downloading {url}: {e}", locator=url) from e
        return io.BytesIO(response.content)


def _text_leaf(locator: Locator, modified_at: datetime, content: str | bytes) -> Leaf:
    data = content.encode("utf-8") if isinstance(content, str) else content
    return Leaf(locator=locator, modified_at=modified_at, producer=functools.partial(io.BytesIO, data))


def _extension(url: str) -> str:
    ext = posixpath.splitext(urlsplit(url).path)[1].lstrip(".")
    return ext or "jpg"

"""Resource bindings for the blog REST API (keys, URLs, typed snapshots)."""

from typing import Any, Callable, Dict, List, Optional

from services.data_access import DataAccess, MutationResult, QueryResult
from use_cases.domain_models import Blog, Comment, Feedback, Story

BLOGS_URL = "/blogs"
COMMENTS_URL = "/comments"
FEEDBACK_URL = "/feedback"
STORIES_URL = "/stories"

BLOGS_KEY = ("blogs",)
COMMENTS_KEY = ("comments",)
FEEDBACK_KEY = ("feedback",)
STORIES_KEY = ("stories",)


def _items(payload: Any) -> List[Dict[str, Any]]:
    # List endpoints may be paginated ({count, next, previous, results}).
    if isinstance(payload, dict) and isinstance(payload.get("results"), list):
        return payload["results"]
    if isinstance(payload, list):
        return payload
    return []


def _map_list(result: QueryResult, factory: Callable[[Dict[str, Any]], Any]) -> QueryResult:
    if result.data is None:
        return result
    return QueryResult(data=[factory(item) for item in _items(result.data)], is_loading=result.is_loading, error=result.error)


def _blog_filter(blog_id: Optional[int]) -> Optional[Dict[str, Any]]:
    return {"blog": blog_id} if blog_id not in (None, "") else None


class BlogApi:
    def __init__(self, data: DataAccess):
        self.data = data

    # --- Blogs ---
    def list_blogs(self) -> QueryResult:
        return _map_list(self.data.read(BLOGS_KEY, f"{BLOGS_URL}/"), Blog.from_dict)

    def get_blog(self, blog_id: int) -> QueryResult:
        # Detail lives under the "blogs" prefix so list invalidation refreshes it too.
        result = self.data.read(BLOGS_KEY + (blog_id,), f"{BLOGS_URL}/{blog_id}/")
        if not isinstance(result.data, dict):
            return result
        return QueryResult(data=Blog.from_dict(result.data), is_loading=result.is_loading, error=result.error)

    def create_blog(self, payload: Dict[str, Any]) -> MutationResult:
        return self.data.create(f"{BLOGS_URL}/", BLOGS_KEY, payload)

    def update_blog(self, blog_id: int, payload: Dict[str, Any]) -> MutationResult:
        return self.data.update(BLOGS_URL, BLOGS_KEY, blog_id, payload)

    def delete_blog(self, blog_id: int) -> MutationResult:
        return self.data.delete(BLOGS_URL, BLOGS_KEY, blog_id)

    # --- Comments ---
    def list_comments(self, blog_id: Optional[int] = None) -> QueryResult:
        result = self.data.read(COMMENTS_KEY, f"{COMMENTS_URL}/", _blog_filter(blog_id))
        return _map_list(result, Comment.from_dict)

    def delete_comment(self, comment_id: int) -> MutationResult:
        return self.data.delete(COMMENTS_URL, COMMENTS_KEY, comment_id)

    # --- Feedback ---
    def list_feedback(self, blog_id: Optional[int] = None) -> QueryResult:
        result = self.data.read(FEEDBACK_KEY, f"{FEEDBACK_URL}/", _blog_filter(blog_id))
        return _map_list(result, Feedback.from_dict)

    def delete_feedback(self, feedback_id: int) -> MutationResult:
        return self.data.delete(FEEDBACK_URL, FEEDBACK_KEY, feedback_id)

    # --- Stories ---
    def list_stories(self) -> QueryResult:
        return _map_list(self.data.read(STORIES_KEY, f"{STORIES_URL}/"), Story.from_dict)

    def set_story_publish(self, story_id: int, allow_publish: bool) -> MutationResult:
        return self.data.update(STORIES_URL, STORIES_KEY, story_id, {"allow_publish": allow_publish})

    def delete_story(self, story_id: int) -> MutationResult:
        return self.data.delete(STORIES_URL, STORIES_KEY, story_id)

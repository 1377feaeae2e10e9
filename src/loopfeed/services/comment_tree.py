# src/loopfeed/services/comment_tree.py
"""Threaded comments: creation, listing, editing and cascading deletion.

Bookkeeping rules:

* A top-level comment bumps its post's ``comments_count``.
* A reply at any depth bumps ``reply_count`` on the thread's root comment, so
  a root's counter equals the size of its whole subtree.
* Deleting a reply takes ``1 + descendants`` off the root; deleting a root
  takes 1 off the post and removes the thread.

Tree walks run over ``parent_id`` one level at a time with an explicit
worklist and stop at ``COMMENT_TREE_MAX_NODES`` / ``COMMENT_MAX_DEPTH`` so a
corrupt (cyclic or huge) thread cannot stall a request.

Each public operation commits once. A failure before the commit leaves the
session to be rolled back by its owner, so counters and rows change together.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from loopfeed.core.settings import settings
from loopfeed.db.time import utcnow
from loopfeed.models import Comment, Post
from loopfeed.models.comment import MAX_COMMENT_LENGTH
from loopfeed.models.reaction import REACTION_TARGET_COMMENT

from .counters import adjust_counter
from .engagement import ReactionState, clear_reactions, reaction_state, reaction_states, toggle_reaction
from .errors import ForbiddenError, InternalError, InvalidInputError, NotFoundError
from .pagination import Page, PageRequest, paginate_query, paginate_sequence
from .post_service import get_visible_post

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommentView:
    """A comment together with the viewer-relative reaction state."""

    comment: Comment
    reactions: ReactionState


@dataclass(frozen=True)
class CreatedComment:
    """Result of :func:`add_comment`."""

    view: CommentView
    post_comment_count: int


@dataclass(frozen=True)
class DeletedComment:
    """Result of :func:`delete_comment`."""

    comment_id: int
    removed: int


@dataclass
class Subtree:
    """All descendants of one comment, grouped by depth.

    ``levels[0]`` holds direct replies, ``levels[1]`` their replies, and so
    on. Within a level, comments are ordered oldest first.
    """

    root_id: int
    levels: list[list[Comment]] = field(default_factory=list)

    @property
    def size(self) -> int:
        return sum(len(level) for level in self.levels)

    def ids_bottom_up(self) -> list[list[int]]:
        """Return descendant ids level by level, deepest level first."""
        return [[comment.id for comment in level] for level in reversed(self.levels)]

    def preorder(self) -> list[Comment]:
        """Flatten the subtree depth-first, siblings oldest first."""
        children: dict[int | None, list[Comment]] = defaultdict(list)
        for level in self.levels:
            for comment in level:
                children[comment.parent_id].append(comment)

        ordered: list[Comment] = []
        stack = list(reversed(children.get(self.root_id, [])))
        while stack:
            node = stack.pop()
            ordered.append(node)
            stack.extend(reversed(children.get(node.id, [])))
        return ordered


def _clean_content(content: str | None) -> str:
    body = (content or "").strip()
    if not body:
        raise InvalidInputError("Content is required")
    if len(body) > MAX_COMMENT_LENGTH:
        raise InvalidInputError(f"Content must be at most {MAX_COMMENT_LENGTH} characters")
    return body


def _get_comment_or_404(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


def find_root(db: Session, comment: Comment) -> Comment | None:
    """Walk parent links up to the thread's root.

    Returns:
        The topmost comment, or None when the chain is broken by a parent that
        no longer exists (an orphan; see ``services.integrity``).

    Raises:
        InternalError: If the chain loops or is deeper than ``COMMENT_MAX_DEPTH``.
    """
    current = comment
    visited = {comment.id}
    for _ in range(settings.comment_max_depth):
        if current.parent_id is None:
            return current
        parent = db.get(Comment, current.parent_id)
        if parent is None:
            logger.warning(
                "Comment %s has a missing parent %s; thread root unresolved",
                current.id,
                current.parent_id,
            )
            return None
        if parent.id in visited:
            raise InternalError(f"Comment thread containing {comment.id} has a parent cycle")
        visited.add(parent.id)
        current = parent
    raise InternalError(
        f"Comment thread containing {comment.id} is deeper than {settings.comment_max_depth}"
    )


def collect_subtree(db: Session, comment_id: int) -> Subtree:
    """Load every descendant of ``comment_id`` using one query per depth level.

    Raises:
        InternalError: If the subtree exceeds ``COMMENT_TREE_MAX_NODES``.
    """
    subtree = Subtree(root_id=comment_id)
    seen = {comment_id}
    frontier = [comment_id]
    total = 0
    while frontier:
        rows = db.execute(
            select(Comment)
            .where(Comment.parent_id.in_(frontier))
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        ).scalars().all()
        level = [row for row in rows if row.id not in seen]
        if not level:
            break
        total += len(level)
        if total > settings.comment_tree_max_nodes:
            raise InternalError(
                f"Comment {comment_id} has more than {settings.comment_tree_max_nodes} replies"
            )
        seen.update(row.id for row in level)
        subtree.levels.append(level)
        frontier = [row.id for row in level]
    return subtree


def count_descendants(db: Session, comment_id: int) -> int:
    """Return the number of comments below ``comment_id`` at any depth."""
    return collect_subtree(db, comment_id).size


def _with_reactions(db: Session, page: Page[Comment], viewer_id: int | None) -> Page[CommentView]:
    states = reaction_states(
        db, REACTION_TARGET_COMMENT, [comment.id for comment in page.items], viewer_id
    )
    return page.map(lambda comment: CommentView(comment=comment, reactions=states[comment.id]))


def add_comment(
    db: Session,
    *,
    post_id: int,
    author_id: int,
    content: str,
    parent_id: int | None = None,
) -> CreatedComment:
    """Create a comment or a reply.

    Args:
        db: Database session
        post_id: Post being commented on
        author_id: Caller identity
        content: Comment body (trimmed, 1-1000 characters)
        parent_id: Comment being replied to, if any

    Returns:
        The new comment and the post's top-level comment count.

    Raises:
        InvalidInputError: Empty or oversized body, or a parent on another post.
        NotFoundError: Missing post or parent comment, or a private post the
            author does not own.
        InternalError: The parent's ancestor chain is broken or cyclic.
    """
    body = _clean_content(content)
    post = get_visible_post(db, post_id, author_id)

    root_id: int | None = None
    if parent_id is not None:
        parent = db.get(Comment, parent_id)
        if parent is None:
            raise NotFoundError("Parent comment not found")
        if parent.post_id != post.id:
            raise InvalidInputError("Parent comment does not belong to this post")
        root = find_root(db, parent)
        if root is None:
            raise InternalError(f"Comment thread above comment {parent.id} is broken")
        root_id = root.id

    comment = Comment(
        post_id=post.id,
        author_id=author_id,
        content=body,
        parent_id=parent_id,
    )
    db.add(comment)

    if root_id is None:
        adjust_counter(db, Post.comments_count, Post.id == post.id, 1)
    else:
        adjust_counter(db, Comment.reply_count, Comment.id == root_id, 1)

    db.commit()
    db.refresh(comment)
    db.refresh(post)
    logger.info(
        "User %s commented %s on post %s (parent=%s)", author_id, comment.id, post.id, parent_id
    )
    return CreatedComment(
        view=CommentView(comment=comment, reactions=ReactionState()),
        post_comment_count=post.comments_count,
    )


def list_top_level(
    db: Session,
    post_id: int,
    page: PageRequest,
    viewer_id: int | None = None,
) -> Page[CommentView]:
    """Return a post's top-level comments, newest first."""
    get_visible_post(db, post_id, viewer_id)
    stmt = (
        select(Comment)
        .where(Comment.post_id == post_id, Comment.parent_id.is_(None))
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    return _with_reactions(db, paginate_query(db, stmt, page), viewer_id)


def list_descendants(
    db: Session,
    comment_id: int,
    page: PageRequest,
    viewer_id: int | None = None,
) -> Page[CommentView]:
    """Return one page of the entire subtree below a comment.

    The subtree is flattened depth-first with siblings oldest first, and the
    page reports the total number of descendants.
    """
    comment = _get_comment_or_404(db, comment_id)
    get_visible_post(db, comment.post_id, viewer_id)
    ordered = collect_subtree(db, comment.id).preorder()
    return _with_reactions(db, paginate_sequence(ordered, page), viewer_id)


def update_comment(
    db: Session,
    comment_id: int,
    caller_id: int,
    content: str,
) -> CommentView:
    """Edit a comment's body. Only the author may edit."""
    body = _clean_content(content)
    comment = _get_comment_or_404(db, comment_id)
    if comment.author_id != caller_id:
        raise ForbiddenError("Not authorized to edit this comment")

    comment.content = body
    comment.is_edited = True
    comment.edited_at = utcnow()
    db.commit()
    db.refresh(comment)
    return CommentView(
        comment=comment,
        reactions=reaction_state(db, REACTION_TARGET_COMMENT, comment.id, caller_id),
    )


def delete_comment(db: Session, comment_id: int, caller_id: int) -> DeletedComment:
    """Delete a comment and its whole subtree. Only the author may delete.

    Deleting a reply whose ancestor chain is broken still removes it, but no
    root counter can be adjusted; ``services.integrity`` recounts those.

    Raises:
        NotFoundError: If the comment does not exist.
        ForbiddenError: If the caller is not the author.
        InternalError: If the subtree or ancestor chain exceeds the walk limits.
    """
    comment = _get_comment_or_404(db, comment_id)
    if comment.author_id != caller_id:
        raise ForbiddenError("Not authorized to delete this comment")

    subtree = collect_subtree(db, comment.id)
    descendants = subtree.size
    post_id = comment.post_id

    if comment.parent_id is not None:
        root = find_root(db, comment)
        if root is not None:
            adjust_counter(db, Comment.reply_count, Comment.id == root.id, -(1 + descendants))
    else:
        adjust_counter(db, Post.comments_count, Post.id == post_id, -1)

    doomed: list[int] = []
    for level_ids in subtree.ids_bottom_up():
        db.execute(delete(Comment).where(Comment.id.in_(level_ids)))
        doomed.extend(level_ids)
    db.execute(delete(Comment).where(Comment.id == comment_id))
    doomed.append(comment_id)
    clear_reactions(db, REACTION_TARGET_COMMENT, doomed)

    db.commit()
    logger.info(
        "User %s deleted comment %s on post %s with %d replies",
        caller_id,
        comment_id,
        post_id,
        descendants,
    )
    return DeletedComment(comment_id=comment_id, removed=len(doomed))


def react_to_comment(db: Session, comment_id: int, user_id: int, reaction: str) -> ReactionState:
    """Toggle a like or dislike on a comment under a post the user can see."""
    comment = _get_comment_or_404(db, comment_id)
    get_visible_post(db, comment.post_id, user_id)
    return toggle_reaction(db, comment, user_id, reaction)

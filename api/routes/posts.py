"""
api/routes/posts.py -- Posts, likes, and comments.

Routes (in registration order to avoid FastAPI path capture conflicts):
  POST   /posts                              -- create post
  GET    /posts                              -- all posts, newest first
  GET    /posts/{post_id}                    -- one post
  DELETE /posts/{post_id}                    -- delete own post
  PUT    /posts/like/{post_id}               -- like (once per user)
  PUT    /posts/unlike/{post_id}             -- remove own like
  POST   /posts/comment/{post_id}            -- add comment
  DELETE /posts/comment/{post_id}/{comment_id}  -- delete own comment

All routes require a session token. The router-level dependency runs the auth
guard first; handlers that need the identity declare it again (FastAPI caches
the dependency result per request, so the token is verified once).

Ownership: delete post and delete comment go through auth.permissions.ensure_owner.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from api.models import CommentResponse, LikeResponse, MessageResponse, PostResponse, TextRequest, json_body
from auth.dependencies import get_current_user
from auth.models import TokenClaim
from auth.permissions import ensure_owner
from auth.store import UserStore
from core.errors import Conflict, NotFound
from core.ids import new_id
from posts.models import Comment, Like, Post
from posts.store import PostStore, now_iso

logger = logging.getLogger("devconnector.api.posts")

router = APIRouter(dependencies=[Depends(get_current_user)])


def _load_post(request: Request, post_id: str) -> Post:
    post_store: PostStore = request.app.state.post_store
    post = post_store.get_post(post_id)
    if post is None:
        raise NotFound("Post not found")
    return post


def _author(request: Request, claim: TokenClaim):
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(claim.id)
    if user is None:
        raise NotFound("User not found")
    return user


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------


@router.post("/posts", response_model=PostResponse)
def create_post(
    request: Request,
    claim: TokenClaim = Depends(get_current_user),
    body: TextRequest = Depends(json_body(TextRequest)),
) -> PostResponse:
    """Create a post. The author's current name and avatar are copied onto it."""
    post_store: PostStore = request.app.state.post_store
    author = _author(request, claim)
    post = post_store.create_post(Post(user=claim.id, text=body.text, name=author.name, avatar=author.avatar))
    return PostResponse.from_domain(post)


@router.get("/posts", response_model=list[PostResponse])
def list_posts(request: Request) -> list[PostResponse]:
    post_store: PostStore = request.app.state.post_store
    return [PostResponse.from_domain(p) for p in post_store.list_posts()]


@router.get("/posts/{post_id}", response_model=PostResponse)
def get_post(request: Request, post_id: str) -> PostResponse:
    return PostResponse.from_domain(_load_post(request, post_id))


@router.delete("/posts/{post_id}", response_model=MessageResponse)
def delete_post(request: Request, post_id: str, claim: TokenClaim = Depends(get_current_user)) -> MessageResponse:
    post_store: PostStore = request.app.state.post_store
    post = _load_post(request, post_id)
    ensure_owner(claim, post.user)
    post_store.delete_post(post_id)
    return MessageResponse(msg="Post removed")


# ---------------------------------------------------------------------------
# Likes
#
# Both routes are guarded, not toggles: liking twice or unliking a post the
# caller never liked is a 400 and leaves the likes list untouched.
# ---------------------------------------------------------------------------


@router.put("/posts/like/{post_id}", response_model=list[LikeResponse])
def like_post(request: Request, post_id: str, claim: TokenClaim = Depends(get_current_user)) -> list[LikeResponse]:
    post_store: PostStore = request.app.state.post_store
    post = _load_post(request, post_id)
    if post.liked_by(claim.id):
        raise Conflict("Post already liked")
    likes = [Like(user=claim.id, id=new_id())] + post.likes
    post_store.replace_likes(post_id, likes)
    return [LikeResponse.from_domain(x) for x in likes]


@router.put("/posts/unlike/{post_id}", response_model=list[LikeResponse])
def unlike_post(request: Request, post_id: str, claim: TokenClaim = Depends(get_current_user)) -> list[LikeResponse]:
    post_store: PostStore = request.app.state.post_store
    post = _load_post(request, post_id)
    if not post.liked_by(claim.id):
        raise Conflict("Post has not yet been liked")
    likes = [x for x in post.likes if x.user != claim.id]
    post_store.replace_likes(post_id, likes)
    return [LikeResponse.from_domain(x) for x in likes]


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


@router.post("/posts/comment/{post_id}", response_model=list[CommentResponse])
def add_comment(
    request: Request,
    post_id: str,
    claim: TokenClaim = Depends(get_current_user),
    body: TextRequest = Depends(json_body(TextRequest)),
) -> list[CommentResponse]:
    post_store: PostStore = request.app.state.post_store
    author = _author(request, claim)
    post = _load_post(request, post_id)
    comment = Comment(
        user=claim.id,
        text=body.text,
        name=author.name,
        avatar=author.avatar,
        id=new_id(),
        date=now_iso(),
    )
    comments = [comment] + post.comments
    post_store.replace_comments(post_id, comments)
    return [CommentResponse.from_domain(c) for c in comments]


@router.delete("/posts/comment/{post_id}/{comment_id}", response_model=list[CommentResponse])
def delete_comment(
    request: Request,
    post_id: str,
    comment_id: str,
    claim: TokenClaim = Depends(get_current_user),
) -> list[CommentResponse]:
    """Delete a comment the caller wrote.

    Known inconsistency kept for compatibility: after the ownership check on
    comment_id passes, the entry removed is the first (newest) comment by the
    caller, which is not necessarily comment_id when the caller has several.
    """
    post_store: PostStore = request.app.state.post_store
    post = _load_post(request, post_id)
    target = next((c for c in post.comments if c.id == comment_id), None)
    if target is None:
        raise NotFound("Comment does not exist")
    ensure_owner(claim, target.user)

    remove_index = [c.user for c in post.comments].index(claim.id)
    comments = post.comments[:remove_index] + post.comments[remove_index + 1 :]
    post_store.replace_comments(post_id, comments)
    return [CommentResponse.from_domain(c) for c in comments]

"""Interaction engine: (pending task, command) -> (pending task, delta, reply).

The engine owns no state of its own. Balances live in the ledger, the
pending task lives in the session store, and the caller delivers the reply.
Wrong guesses, missing tasks and unknown commands are ordinary replies;
only store failures raise (``StoreUnavailable``).
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.commands import Command, CommandKind, parse_command
from app.models.task import GUESS_MAX, GUESS_MIN, PendingTask, TaskKind

logger = logging.getLogger(__name__)

CLICK_REWARD = 1

WELCOME_TEXT = "\n".join([
    "Welcome to DRAW Bot!",
    "Your current points: {points}",
    "",
    "Commands:",
    "/click - daily click (+1)",
    "/video - watch a video (+5)",
    "/ad - visit an ad (+3)",
    "/points - show points",
    "/guess - mini-game (guess 1-5 for +2)",
])
UNKNOWN_TEXT = "Unknown command. Send /start to see available commands."


class ReplyKind(Enum):
    WELCOME = "welcome"
    BALANCE = "balance"
    CLICKED = "clicked"
    VIDEO_STARTED = "video_started"
    AD_STARTED = "ad_started"
    GUESS_STARTED = "guess_started"
    REWARDED = "rewarded"
    NO_PENDING_TASK = "no_pending_task"
    GUESS_CORRECT = "guess_correct"
    GUESS_WRONG = "guess_wrong"
    GUESS_NEEDS_NUMBER = "guess_needs_number"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Reply:
    kind: ReplyKind
    text: str
    delta: int = 0
    total: Optional[int] = None


class InteractionEngine:
    def __init__(self, ledger, sessions, *, video_url: str, ad_url: str, rng: Optional[random.Random] = None):
        self.ledger = ledger
        self.sessions = sessions
        self.video_url = video_url
        self.ad_url = ad_url
        self.rng = rng or random.Random()

        self._handlers = {
            CommandKind.START: self._start,
            CommandKind.POINTS: self._points,
            CommandKind.CLICK: self._click,
            CommandKind.BEGIN_VIDEO: self._begin_video,
            CommandKind.BEGIN_AD: self._begin_ad,
            CommandKind.BEGIN_GUESS: self._begin_guess,
            CommandKind.DONE_VIDEO: self._done_video,
            CommandKind.DONE_AD: self._done_ad,
        }

    async def handle(self, user_id: int, text: str) -> Reply:
        """Run one inbound message through the state machine and return the reply."""
        command = parse_command(text)
        pending = await self.sessions.get(user_id)

        # Пока идёт угадайка, любой ввод считается попыткой
        if pending is not None and pending.kind is TaskKind.GUESS:
            reply = await self._resolve_guess(user_id, pending, command)
        else:
            handler = self._handlers.get(command.kind)
            if handler is None:
                reply = Reply(ReplyKind.UNKNOWN, UNKNOWN_TEXT)
            else:
                reply = await handler(user_id, pending)

        logger.info(f"User {user_id}: {command.kind.value} -> {reply.kind.value} ({reply.delta:+d})")
        return reply

    async def _start(self, user_id, pending):
        user = await self.ledger.get_or_create(user_id)
        return Reply(ReplyKind.WELCOME, WELCOME_TEXT.format(points=user.points), total=user.points)

    async def _points(self, user_id, pending):
        user = await self.ledger.get_or_create(user_id)
        return Reply(ReplyKind.BALANCE, f"You have {user.points} points.", total=user.points)

    async def _click(self, user_id, pending):
        total = await self.ledger.apply_delta(user_id, CLICK_REWARD)
        return Reply(
            ReplyKind.CLICKED,
            f"Thanks for clicking! +{CLICK_REWARD} point.\nTotal points: {total}.",
            delta=CLICK_REWARD,
            total=total,
        )

    async def _begin_video(self, user_id, pending):
        await self.sessions.set(user_id, PendingTask.video())
        return Reply(
            ReplyKind.VIDEO_STARTED,
            f"Watch this video: {self.video_url}\nSend /done video when finished to claim points.",
        )

    async def _begin_ad(self, user_id, pending):
        await self.sessions.set(user_id, PendingTask.ad())
        return Reply(
            ReplyKind.AD_STARTED,
            f"Visit this ad: {self.ad_url}\nSend /done ad when done to claim points.",
        )

    async def _begin_guess(self, user_id, pending):
        target = self.rng.randint(GUESS_MIN, GUESS_MAX)
        await self.sessions.set(user_id, PendingTask.guess(target))
        return Reply(
            ReplyKind.GUESS_STARTED,
            f"Guess a number between {GUESS_MIN} and {GUESS_MAX}. Reply with your guess.",
        )

    async def _done_video(self, user_id, pending):
        return await self._complete(user_id, pending, TaskKind.VIDEO)

    async def _done_ad(self, user_id, pending):
        return await self._complete(user_id, pending, TaskKind.AD)

    async def _complete(self, user_id: int, pending: Optional[PendingTask], kind: TaskKind) -> Reply:
        if pending is None or pending.kind is not kind:
            return Reply(
                ReplyKind.NO_PENDING_TASK,
                f"You have no pending {kind.value} task. Use /{kind.value} to start one.",
            )

        reward = pending.reward
        # Сначала начисляем, потом чистим задачу: при сбое БД задача останется
        total = await self.ledger.apply_delta(user_id, reward)
        await self.sessions.clear(user_id)
        return Reply(
            ReplyKind.REWARDED,
            f"Thanks! You earned {reward} points.\nTotal points: {total}.",
            delta=reward,
            total=total,
        )

    async def _resolve_guess(self, user_id: int, pending: PendingTask, command: Command) -> Reply:
        if command.kind is not CommandKind.SUBMIT_GUESS:
            return Reply(
                ReplyKind.GUESS_NEEDS_NUMBER,
                f"Please reply with a number between {GUESS_MIN} and {GUESS_MAX}.",
            )

        if command.number != pending.target:
            return Reply(ReplyKind.GUESS_WRONG, "Wrong guess, try again!")

        reward = pending.reward
        total = await self.ledger.apply_delta(user_id, reward)
        await self.sessions.clear(user_id)
        return Reply(
            ReplyKind.GUESS_CORRECT,
            f"Correct! You earned {reward} points.\nTotal points: {total}.",
            delta=reward,
            total=total,
        )

"""Tests for refresh token rotation, revocation and the anti-replay check."""

import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

from auth import AuthContext, AuthError, TokenClass


def test_rotate_without_token(auth):
    assert auth.rotator.rotate(None).error is AuthError.NO_TOKEN
    assert auth.rotator.rotate("").error is AuthError.NO_TOKEN


def test_undecodable_token_is_rejected_before_any_lookup(auth):
    with patch.object(auth.store, "get") as lookup:
        result = auth.rotator.rotate("garbage")
    assert result.error is AuthError.INVALID_TOKEN
    lookup.assert_not_called()


def test_access_token_cannot_be_used_to_refresh(auth, account):
    access = auth.rotator.start_session(account.id).access_token
    assert auth.rotator.rotate(access).error is AuthError.INVALID_TOKEN


def test_expired_refresh_token_is_rejected(auth, account, clock):
    refresh = auth.rotator.start_session(account.id).refresh_token
    clock.advance(days=7)
    assert auth.rotator.rotate(refresh).error is AuthError.INVALID_TOKEN


def test_unknown_account(auth):
    orphan = auth.codec.encode("no-such-account", TokenClass.REFRESH)
    assert auth.rotator.rotate(orphan).error is AuthError.UNKNOWN_ACCOUNT


def test_account_without_live_token_rejects_valid_token(auth, account):
    never_stored = auth.codec.encode(account.id, TokenClass.REFRESH)
    assert auth.rotator.rotate(never_stored).error is AuthError.STALE_TOKEN


def test_rotation_issues_new_pair_and_makes_old_token_stale(auth, account):
    r0 = auth.rotator.start_session(account.id).refresh_token

    rotated = auth.rotator.rotate(r0)

    assert rotated.ok
    r1 = rotated.value.refresh_token
    assert r1 != r0
    assert auth.guard.verify(rotated.value.access_token).value == account.id
    # r0 still decodes and is unexpired, but is no longer the live token
    assert auth.codec.decode(r0, TokenClass.REFRESH).ok
    assert auth.rotator.rotate(r0).error is AuthError.STALE_TOKEN
    assert auth.store.get(account.id).holds_refresh_token(r1)
    assert auth.rotator.rotate(r1).ok


def test_login_supersedes_previous_session(auth, account):
    first = auth.rotator.start_session(account.id).refresh_token
    second = auth.rotator.start_session(account.id).refresh_token

    assert auth.rotator.rotate(first).error is AuthError.STALE_TOKEN
    assert auth.rotator.rotate(second).ok


def test_losing_a_rotation_race_does_not_overwrite_the_winner(auth, account):
    r0 = auth.rotator.start_session(account.id).refresh_token
    real_cas = auth.store.compare_and_set_refresh_token
    winner = {}

    def competing_cas(account_id, expected, new):
        # another request rotates r0 between our live check and our swap
        if "pair" not in winner:
            winner["pair"] = auth.issuer.issue(account_id)
            assert real_cas(account_id, expected, winner["pair"].refresh_token)
        return real_cas(account_id, expected, new)

    with patch.object(auth.store, "compare_and_set_refresh_token", side_effect=competing_cas):
        result = auth.rotator.rotate(r0)

    assert result.error is AuthError.STALE_TOKEN
    assert auth.store.get(account.id).holds_refresh_token(winner["pair"].refresh_token)


def test_concurrent_refreshes_with_same_token_have_one_winner(settings, store):
    ctx = AuthContext.build(settings, store)
    account = store.create("race@x.com", "unused-hash")
    r0 = ctx.rotator.start_session(account.id).refresh_token

    barrier = threading.Barrier(2)
    real_get = store.get

    def get_then_wait(account_id):
        found = real_get(account_id)
        barrier.wait(timeout=5)
        return found

    def rotate_in_worker(_):
        try:
            return ctx.rotator.rotate(r0)
        finally:
            # each worker thread owns a scoped session
            store.close()

    with patch.object(store, "get", side_effect=get_then_wait):
        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(rotate_in_worker, range(2)))

    winners = [r for r in results if r.ok]
    losers = [r for r in results if not r.ok]
    assert len(winners) == 1
    assert [r.error for r in losers] == [AuthError.STALE_TOKEN]

    live = store.get(account.id)
    assert live.holds_refresh_token(winners[0].value.refresh_token)
    assert not live.holds_refresh_token(r0)


def test_end_session_revokes_live_token(auth, account):
    refresh = auth.rotator.start_session(account.id).refresh_token

    assert auth.rotator.end_session(refresh).ok

    assert not auth.store.get(account.id).has_live_refresh_token
    assert auth.rotator.rotate(refresh).error is AuthError.STALE_TOKEN


def test_end_session_with_superseded_token_keeps_current_session(auth, account):
    old = auth.rotator.start_session(account.id).refresh_token
    current = auth.rotator.rotate(old).value.refresh_token

    assert auth.rotator.end_session(old).error is AuthError.STALE_TOKEN
    assert auth.store.get(account.id).holds_refresh_token(current)


def test_end_session_with_bad_token(auth):
    assert auth.rotator.end_session(None).error is AuthError.NO_TOKEN
    assert auth.rotator.end_session("garbage").error is AuthError.INVALID_TOKEN


def test_end_account_session(auth, account):
    refresh = auth.rotator.start_session(account.id).refresh_token
    auth.rotator.end_account_session(account.id)
    assert auth.rotator.rotate(refresh).error is AuthError.STALE_TOKEN

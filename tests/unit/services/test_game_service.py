import uuid

import pytest

from hangman.core.error import DomainErrorCode, HangmanDomainError
from hangman.models.room import GameStatus
from hangman.models.round import RoundStatus


def start_and_set_word(game_service, room, word_giver, word="CAT", max_guesses=None):
    game_service.start_game(room.id, word_giver.id, max_guesses)
    return game_service.set_word(room.id, word_giver.id, word, "an animal")


def guess_all(game_service, room, guesser, letters):
    check = None
    for letter in letters:
        check = game_service.guess_letter(room.id, guesser.id, letter)
    return check


def assert_domain_error(exc_info, code, message=None):
    assert exc_info.value.code == code
    if message is not None:
        assert exc_info.value.message == message


class TestGameServiceRooms:
    def test_create_room(self, game_service, store):
        room, player = game_service.create_room("alice")

        assert len(room.room_code) == 6
        assert room.game_status == GameStatus.WAITING
        assert room.max_guesses == 6
        assert player.is_creator is True
        assert player.is_online is True
        assert store.players.get_by_room(room.id) == [player]

    def test_join_room(self, game_service, store):
        room, alice = game_service.create_room("alice")

        joined_room, bob = game_service.join_room(room.room_code, "bob")

        assert joined_room.id == room.id
        assert bob.is_creator is False
        assert store.players.get_by_room(room.id) == [alice, bob]

    def test_join_unknown_room_creates_no_player(self, game_service, store):
        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.join_room("NOPE00", "bob")

        assert_domain_error(exc_info, DomainErrorCode.ROOM_NOT_FOUND, "Room not found")
        assert store.players.count() == 0

    def test_join_full_room_creates_no_player(self, game_service, store, two_player_room):
        room, _, _ = two_player_room

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.join_room(room.room_code, "carol")

        assert_domain_error(exc_info, DomainErrorCode.ROOM_IS_FULL, "Room is full")
        assert store.players.count(room_id=room.id) == 2

    def test_offline_players_still_fill_the_room(self, game_service, two_player_room):
        room, _, bob = two_player_room
        game_service.mark_offline(bob.id)

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.join_room(room.room_code, "carol")

        assert_domain_error(exc_info, DomainErrorCode.ROOM_IS_FULL)

    def test_join_with_taken_name(self, game_service):
        room, _ = game_service.create_room("alice")

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.join_room(room.room_code, "alice")

        assert_domain_error(exc_info, DomainErrorCode.PLAYER_NAME_TAKEN)

    def test_rejoin_keeps_identity_and_score(self, game_service, store, two_player_room):
        room, _, bob = two_player_room
        store.players.update(bob.id, score=3)
        game_service.mark_offline(bob.id)

        _, rejoined = game_service.rejoin_room(room.room_code, "bob")

        assert rejoined.id == bob.id
        assert rejoined.score == 3
        assert rejoined.is_online is True
        assert store.players.count(room_id=room.id) == 2

    def test_rejoin_unknown_room(self, game_service):
        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.rejoin_room("NOPE00", "bob")

        assert_domain_error(exc_info, DomainErrorCode.ROOM_NOT_FOUND, "Room not found")

    def test_rejoin_unknown_player(self, game_service, two_player_room):
        room, _, _ = two_player_room

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.rejoin_room(room.room_code, "carol")

        assert_domain_error(
            exc_info, DomainErrorCode.PLAYER_NOT_FOUND, "Player not found in this room"
        )

    def test_mark_offline_keeps_player(self, game_service, store, two_player_room):
        room, alice, _ = two_player_room

        player = game_service.mark_offline(alice.id)

        assert player.is_online is False
        assert store.players.get_by_uuid(alice.id) is not None

    def test_mark_offline_unknown_player(self, game_service):
        assert game_service.mark_offline(uuid.uuid4()) is None

    def test_get_game_state_unknown_room(self, game_service):
        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.get_game_state("NOPE00")

        assert_domain_error(exc_info, DomainErrorCode.ROOM_NOT_FOUND)

    def test_delete_room(self, game_service, store, two_player_room):
        room, _, _ = two_player_room

        deleted = game_service.delete_room(room.room_code)

        assert deleted.id == room.id
        assert game_service.find_game_state(room.room_code) is None
        assert store.players.count() == 0


class TestGameServiceStartGame:
    def test_start_game(self, game_service, two_player_room):
        room, alice, bob = two_player_room

        started = game_service.start_game(room.id, bob.id)

        assert started.game_status == GameStatus.WORD_SETTING
        assert started.round_number == 1
        assert started.word_giver_id == alice.id
        assert started.guesser_id == bob.id
        assert started.max_guesses == 6

    def test_needs_two_players(self, game_service):
        room, alice = game_service.create_room("alice")

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.start_game(room.id, alice.id)

        assert_domain_error(exc_info, DomainErrorCode.NOT_ENOUGH_PLAYERS, "Need 2 players to start")

    def test_already_started(self, game_service, two_player_room):
        room, alice, _ = two_player_room
        game_service.start_game(room.id, alice.id)

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.start_game(room.id, alice.id)

        assert_domain_error(exc_info, DomainErrorCode.GAME_ALREADY_STARTED)

    def test_creator_sets_difficulty(self, game_service, two_player_room):
        room, alice, _ = two_player_room

        started = game_service.start_game(room.id, alice.id, 3)

        assert started.max_guesses == 3

    def test_only_creator_sets_difficulty(self, game_service, two_player_room):
        room, _, bob = two_player_room

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.start_game(room.id, bob.id, 3)

        assert_domain_error(exc_info, DomainErrorCode.NOT_ROOM_CREATOR)
        assert game_service.store.rooms.get_by_uuid(room.id).game_status == GameStatus.WAITING

    @pytest.mark.parametrize("max_guesses", [0, 27])
    def test_difficulty_out_of_range(self, game_service, two_player_room, max_guesses):
        room, alice, _ = two_player_room

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.start_game(room.id, alice.id, max_guesses)

        assert_domain_error(
            exc_info, DomainErrorCode.INVALID_DIFFICULTY, "Max guesses must be between 1 and 26"
        )

    def test_unknown_room(self, game_service, room_id, player_id):
        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.start_game(room_id, player_id)

        assert_domain_error(exc_info, DomainErrorCode.ROOM_NOT_FOUND, "Room not found")


class TestGameServiceSetWord:
    def test_set_word(self, game_service, store, two_player_room):
        room, alice, bob = two_player_room
        game_service.start_game(room.id, alice.id, 4)

        game_round = game_service.set_word(room.id, alice.id, "cat", "meows")

        assert game_round.word == "CAT"
        assert game_round.hint == "meows"
        assert game_round.max_guesses == 4
        assert game_round.word_giver_id == alice.id
        assert game_round.guesser_id == bob.id
        assert game_round.status == RoundStatus.IN_PROGRESS

        updated = store.rooms.get_by_uuid(room.id)
        assert updated.game_status == GameStatus.GUESSING
        assert updated.current_word == "CAT"
        assert updated.hint == "meows"

    def test_set_word_without_hint(self, game_service, two_player_room):
        room, alice, _ = two_player_room
        game_service.start_game(room.id, alice.id)

        game_round = game_service.set_word(room.id, alice.id, "DOG")

        assert game_round.hint is None

    def test_wrong_phase(self, game_service, two_player_room):
        room, alice, _ = two_player_room

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.set_word(room.id, alice.id, "CAT")

        assert_domain_error(exc_info, DomainErrorCode.NOT_WORD_SETTING_PHASE)

    def test_not_word_giver(self, game_service, store, two_player_room):
        room, alice, bob = two_player_room
        game_service.start_game(room.id, alice.id)

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.set_word(room.id, bob.id, "CAT")

        assert_domain_error(exc_info, DomainErrorCode.NOT_WORD_GIVER, "Not your turn to set the word")
        assert store.rounds.count() == 0

    def test_clears_history(self, game_service, store, two_player_room):
        room, alice, bob = two_player_room
        start_and_set_word(game_service, room, alice, "CAT")
        guess_all(game_service, room, bob, ["C", "A", "T"])
        game_service.start_round(room.id)

        game_service.set_word(room.id, bob.id, "DOG")

        assert store.history.get_by_room(room.id) == []
        assert len(store.rounds.get_by_room(room.id)) == 2


class TestGameServiceGuessLetter:
    def test_guess_records_history(self, game_service, store, two_player_room):
        room, alice, bob = two_player_room
        start_and_set_word(game_service, room, alice, "CAT")

        check = game_service.guess_letter(room.id, bob.id, "C")
        game_service.guess_letter(room.id, bob.id, "Z")

        assert check.round_ended is False
        current = store.rounds.get_current_round(room.id)
        assert current.guessed_letters == ["C", "Z"]
        assert current.wrong_guesses == 1
        history = store.history.get_by_room(room.id)
        assert [(e.letter, e.is_correct) for e in history] == [("C", True), ("Z", False)]
        assert all(e.player_id == bob.id for e in history)

    def test_winning_round(self, game_service, store, two_player_room):
        room, alice, bob = two_player_room
        start_and_set_word(game_service, room, alice, "CAT")

        check = guess_all(game_service, room, bob, ["C", "A", "T"])

        assert check.round_ended is True
        assert check.status == RoundStatus.WON
        assert check.winner == "bob"
        assert check.reason == "word_guessed"

        game_round = store.rounds.get_round(room.id, 1)
        assert game_round.status == RoundStatus.WON
        assert game_round.points_awarded == 1
        assert game_round.completed_at is not None
        assert store.players.get_by_uuid(bob.id).score == 1
        assert store.players.get_by_uuid(alice.id).score == 0
        assert store.rooms.get_by_uuid(room.id).game_status == GameStatus.ROUND_FINISHED
        assert store.rounds.get_current_round(room.id) is None

    def test_losing_round(self, game_service, store, two_player_room):
        room, alice, bob = two_player_room
        start_and_set_word(game_service, room, alice, "CAT", max_guesses=3)

        check = guess_all(game_service, room, bob, ["X", "Y", "Z"])

        assert check.status == RoundStatus.LOST
        assert check.reason == "max_guesses_reached"
        game_round = store.rounds.get_round(room.id, 1)
        assert game_round.status == RoundStatus.LOST
        assert game_round.points_awarded == 0
        assert store.players.get_by_uuid(bob.id).score == 0
        assert store.rooms.get_by_uuid(room.id).game_status == GameStatus.ROUND_FINISHED

    def test_repeat_guess_rejected(self, game_service, store, two_player_room):
        room, alice, bob = two_player_room
        start_and_set_word(game_service, room, alice, "CAT")
        game_service.guess_letter(room.id, bob.id, "Q")

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.guess_letter(room.id, bob.id, "Q")

        assert_domain_error(exc_info, DomainErrorCode.LETTER_ALREADY_GUESSED, "Letter already guessed")
        assert store.rounds.get_current_round(room.id).wrong_guesses == 1
        assert len(store.history.get_by_room(room.id)) == 1

    def test_not_guesser(self, game_service, two_player_room):
        room, alice, _ = two_player_room
        start_and_set_word(game_service, room, alice, "CAT")

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.guess_letter(room.id, alice.id, "C")

        assert_domain_error(exc_info, DomainErrorCode.NOT_GUESSER, "Not your turn to guess")

    def test_wrong_phase(self, game_service, two_player_room):
        room, alice, bob = two_player_room
        game_service.start_game(room.id, alice.id)

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.guess_letter(room.id, bob.id, "C")

        assert_domain_error(exc_info, DomainErrorCode.NOT_GUESSING_PHASE)

    def test_round_keeps_its_own_max_guesses(self, game_service, store, two_player_room):
        room, alice, bob = two_player_room
        start_and_set_word(game_service, room, alice, "CAT")
        store.rooms.update(room.id, max_guesses=1)

        check = game_service.guess_letter(room.id, bob.id, "Z")

        assert check.round_ended is False
        assert store.rounds.get_current_round(room.id).max_guesses == 6


class TestGameServiceRounds:
    def test_start_round_rotates_roles(self, game_service, store, two_player_room):
        room, alice, bob = two_player_room
        start_and_set_word(game_service, room, alice, "CAT")
        guess_all(game_service, room, bob, ["C", "A", "T"])

        next_room = game_service.start_round(room.id)

        assert next_room.game_status == GameStatus.WORD_SETTING
        assert next_room.round_number == 2
        assert next_room.word_giver_id == bob.id
        assert next_room.guesser_id == alice.id
        assert next_room.current_word is None
        assert next_room.hint is None

    def test_start_round_before_round_finished(self, game_service, two_player_room):
        room, alice, _ = two_player_room
        start_and_set_word(game_service, room, alice, "CAT")

        with pytest.raises(HangmanDomainError) as exc_info:
            game_service.start_round(room.id)

        assert_domain_error(exc_info, DomainErrorCode.ROUND_NOT_FINISHED)

    def test_at_most_one_round_in_progress(self, game_service, store, two_player_room):
        room, alice, bob = two_player_room
        word_giver, guesser = alice, bob
        game_service.start_game(room.id, alice.id)

        for _ in range(4):
            game_service.set_word(room.id, word_giver.id, "HI")
            assert store.rounds.count(room_id=room.id, status=RoundStatus.IN_PROGRESS) == 1
            guess_all(game_service, room, guesser, ["H", "I"])
            assert store.rounds.count(room_id=room.id, status=RoundStatus.IN_PROGRESS) == 0
            game_service.start_round(room.id)
            word_giver, guesser = guesser, word_giver

        assert store.players.get_by_uuid(alice.id).score == 2
        assert store.players.get_by_uuid(bob.id).score == 2


class TestGameServiceEndGame:
    def test_end_game_with_winner(self, game_service, store, two_player_room):
        room, alice, bob = two_player_room
        start_and_set_word(game_service, room, alice, "CAT")
        guess_all(game_service, room, bob, ["C", "A", "T"])

        result = game_service.end_game(room.id)

        assert result.is_draw is False
        assert result.winner.id == bob.id
        assert result.winner.score == 1
        assert store.rooms.get_by_uuid(room.id).game_status == GameStatus.GAME_FINISHED

    def test_end_game_draw(self, game_service, two_player_room):
        room, alice, _ = two_player_room
        game_service.start_game(room.id, alice.id)

        result = game_service.end_game(room.id)

        assert result.is_draw is True
        assert result.winner is None

    def test_end_game_from_waiting(self, game_service, store):
        room, alice = game_service.create_room("alice")

        result = game_service.end_game(room.id)

        assert result.winner.id == alice.id
        assert store.rooms.get_by_uuid(room.id).game_status == GameStatus.GAME_FINISHED

    def test_rankings(self, game_service, two_player_room):
        room, alice, bob = two_player_room
        start_and_set_word(game_service, room, alice, "CAT")
        guess_all(game_service, room, bob, ["C", "A", "T"])

        rankings = game_service.get_rankings(room.room_code)

        assert [r.name for r in rankings] == ["bob", "alice"]
        assert rankings[0].wins_as_guesser == 1
        assert rankings[0].win_rate == pytest.approx(1.0)

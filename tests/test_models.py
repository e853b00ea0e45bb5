import unittest

from movienight.models import Movie, new_id


class TestApplyVote(unittest.TestCase):
    def _movie(self, up=3, down=1, user_vote=None):
        return Movie(title="Heat", description="Cops and robbers in LA.",
                     votes_up=up, votes_down=down, user_vote=user_vote)

    def test_vote_up_then_retract_restores_tallies(self) -> None:
        movie = self._movie()
        movie.apply_vote("up")
        self.assertEqual((movie.votes_up, movie.votes_down, movie.user_vote), (4, 1, "up"))
        movie.apply_vote(None)
        self.assertEqual((movie.votes_up, movie.votes_down, movie.user_vote), (3, 1, None))

    def test_switch_up_to_down_moves_one_vote(self) -> None:
        movie = self._movie()
        movie.apply_vote("up")
        movie.apply_vote("down")
        self.assertEqual((movie.votes_up, movie.votes_down), (3, 2))
        self.assertEqual(movie.user_vote, "down")

    def test_repeating_same_vote_counts_once(self) -> None:
        movie = self._movie()
        movie.apply_vote("down")
        movie.apply_vote("down")
        self.assertEqual((movie.votes_up, movie.votes_down), (3, 2))

    def test_counters_never_go_negative(self) -> None:
        movie = self._movie(up=0, down=0, user_vote="up")
        movie.apply_vote(None)
        self.assertEqual(movie.votes_up, 0)
        self.assertIsNone(movie.user_vote)

    def test_unknown_vote_type_rejected(self) -> None:
        movie = self._movie()
        with self.assertRaises(ValueError):
            movie.apply_vote("sideways")
        self.assertEqual((movie.votes_up, movie.votes_down, movie.user_vote), (3, 1, None))


class TestNewId(unittest.TestCase):
    def test_ids_are_unique_and_increasing(self) -> None:
        ids = [int(new_id()) for _ in range(200)]
        self.assertEqual(ids, sorted(set(ids)))


if __name__ == "__main__":
    unittest.main()

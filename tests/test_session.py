import unittest
from unittest.mock import MagicMock

from timecapsule.counter import PlaylistCounter
from timecapsule.errors import CreateFailure, InvalidTransition
from timecapsule.models import AddResult, PlaylistRef
from timecapsule.playlists import PlaylistMaterializer
from timecapsule.session import PlaylistSession, SessionState


class TestPlaylistSession(unittest.TestCase):
    def setUp(self):
        self.materializer = MagicMock(spec=PlaylistMaterializer)
        self.materializer.create_playlist.return_value = PlaylistRef("pl1", "Mix")
        self.materializer.add_tracks.return_value = AddResult("pl1", ("u1",), 0)
        self.counter = MagicMock(spec=PlaylistCounter)
        self.counter.record.return_value = 42
        self.session = PlaylistSession(self.materializer, "desc", counter=self.counter)

    def test_happy_path(self):
        self.assertEqual(self.session.state, SessionState.IDLE)
        self.assertFalse(self.session.can_create)

        self.session.choose_name("  Mix ")
        self.assertEqual(self.session.state, SessionState.NAME_CHOSEN)
        self.assertTrue(self.session.can_create)

        self.session.create("user")
        self.materializer.create_playlist.assert_called_once_with("user", "Mix", "desc")
        self.counter.record.assert_called_once_with("pl1")
        self.assertEqual(self.session.created_count, 42)
        self.assertTrue(self.session.can_add)

        self.session.add(["u1"])
        self.materializer.add_tracks.assert_called_once_with("pl1", ["u1"])
        self.assertEqual(self.session.state, SessionState.SONGS_ADDED)

    def test_blank_name_returns_to_idle(self):
        self.session.choose_name("Mix")
        self.session.choose_name("   ")
        self.assertEqual(self.session.state, SessionState.IDLE)

    def test_name_is_escaped(self):
        self.session.choose_name("<b>Mix</b>")
        self.assertEqual(self.session.name, "&lt;b&gt;Mix&lt;/b&gt;")

    def test_cannot_create_without_name(self):
        with self.assertRaises(InvalidTransition):
            self.session.create("user")
        self.materializer.create_playlist.assert_not_called()

    def test_cannot_add_before_create(self):
        self.session.choose_name("Mix")
        with self.assertRaises(InvalidTransition):
            self.session.add(["u1"])

    def test_cannot_add_nothing(self):
        self.session.choose_name("Mix")
        self.session.create("user")
        with self.assertRaises(InvalidTransition):
            self.session.add([])
        self.assertEqual(self.session.state, SessionState.PLAYLIST_CREATED)

    def test_cannot_rename_after_create(self):
        self.session.choose_name("Mix")
        self.session.create("user")
        with self.assertRaises(InvalidTransition):
            self.session.choose_name("Other")

    def test_create_failure_keeps_name_chosen(self):
        self.materializer.create_playlist.side_effect = CreateFailure()
        self.session.choose_name("Mix")
        with self.assertRaises(CreateFailure):
            self.session.create("user")
        self.assertEqual(self.session.state, SessionState.NAME_CHOSEN)
        self.counter.record.assert_not_called()

    def test_counter_outage_does_not_block(self):
        self.counter.record.return_value = None
        self.session.choose_name("Mix")
        self.session.create("user")
        self.assertEqual(self.session.state, SessionState.PLAYLIST_CREATED)
        self.assertIsNone(self.session.created_count)


if __name__ == "__main__":
    unittest.main()

"""Video pipeline tests"""
from datetime import datetime, timezone

import pytest
from google.api_core import exceptions as google_exceptions

from lessonhub.core.config import USERS_COLLECTION, VIDEOS_COLLECTION
from lessonhub.core.exceptions import NotFoundError, PermissionDeniedError
from lessonhub.schemas.coach import Coach
from lessonhub.schemas.video import VideoCreate, VideoQuery, VideoUpdate
from lessonhub.services.video_service import (
    NO_MATCHES_MESSAGE, NO_VIDEOS_MESSAGE, add_video, apply_criteria, delete_video,
    get_videos_by_category, get_videos_by_coach, group_by_category, join_coaches,
    list_coach_videos, list_videos, list_videos_by_category, owner_reference, update_video
)


class TestOwnerReference:
    """Test the coachId / teacherId fallback"""

    def test_coach_id_preferred(self):
        assert owner_reference({"coachId": "a", "teacherId": "b"}) == "a"

    def test_teacher_id_fallback(self):
        assert owner_reference({"coachId": "", "teacherId": "b"}) == "b"
        assert owner_reference({"teacherId": "b"}) == "b"

    def test_no_owner(self):
        assert owner_reference({"title": "orphan"}) is None


class TestApplyCriteria:
    """Test filtering and ordering"""

    VIDEOS = [
        {"id": "a", "date": "2023-01-01", "level": "Level 1", "tag": "Live Session"},
        {"id": "b", "date": "2023-03-01", "level": "Level 2", "tag": "Live Session"},
        {"id": "c", "date": "2023-02-01", "level": "Level 1", "tag": "Recommended by Coach"},
    ]

    def test_newest_first(self):
        ordered = apply_criteria(self.VIDEOS, VideoQuery(sort="newest"))
        assert [video["id"] for video in ordered] == ["b", "c", "a"]

    def test_oldest_first(self):
        ordered = apply_criteria(self.VIDEOS, VideoQuery(sort="oldest"))
        assert [video["id"] for video in ordered] == ["a", "c", "b"]

    def test_level_and_tag_filters_combine(self):
        ordered = apply_criteria(self.VIDEOS, VideoQuery(level="Level 1", tag="Live Session"))
        assert [video["id"] for video in ordered] == ["a"]

    def test_empty_criteria_keep_everything(self):
        assert len(apply_criteria(self.VIDEOS, VideoQuery(tag="", level=""))) == 3

    def test_equal_dates_keep_input_order(self):
        videos = [{"id": str(i), "date": "2023-05-05"} for i in range(4)]
        for sort in ("newest", "oldest"):
            ordered = apply_criteria(videos, VideoQuery(sort=sort))
            assert [video["id"] for video in ordered] == ["0", "1", "2", "3"]

    def test_unparseable_dates_sort_oldest(self):
        videos = [{"id": "bad", "date": "someday"}, {"id": "good", "date": "2020-01-01"}]
        ordered = apply_criteria(videos, VideoQuery(sort="newest"))
        assert [video["id"] for video in ordered] == ["good", "bad"]


@pytest.mark.critical
class TestListVideos:
    """Test the full list pipeline against the store"""

    def test_newest_first_with_coaches(self, seeded_db):
        listing = list_videos(VideoQuery(), seeded_db)

        assert [video.id for video in listing.videos] == ["react-intro", "css-flexbox", "html-basics", "css-grid"]
        assert listing.total == 4
        assert listing.message is None

    def test_oldest_first(self, seeded_db):
        listing = list_videos(VideoQuery(sort="oldest"), seeded_db)
        assert listing.videos[0].id == "css-grid"
        assert listing.videos[-1].id == "react-intro"

    def test_teacher_id_joined(self, seeded_db):
        """Legacy videos that only carry teacherId still get their coach"""
        videos = {video.id: video for video in list_videos(VideoQuery(), seeded_db).videos}

        assert videos["react-intro"].coach.id == "jane-q"
        assert videos["css-flexbox"].coach.name == "bob"

    def test_unresolved_coach_is_none(self, seeded_db):
        seeded_db.seed(VIDEOS_COLLECTION, "orphan", {"title": "Orphan", "date": "2023-12-01", "coachId": "gone"})

        videos = {video.id: video for video in list_videos(VideoQuery(), seeded_db).videos}

        assert videos["orphan"].coach is None

    def test_level_filter(self, seeded_db):
        listing = list_videos(VideoQuery(level="Level 2"), seeded_db)

        assert [video.id for video in listing.videos] == ["css-flexbox"]
        assert listing.filtered is True

    def test_no_match_message(self, seeded_db):
        listing = list_videos(VideoQuery(level="Level 4"), seeded_db)

        assert listing.videos == []
        assert listing.message == NO_MATCHES_MESSAGE

    def test_empty_store_message(self, fake_db):
        listing = list_videos(VideoQuery(), fake_db)

        assert listing.total == 0
        assert listing.message == NO_VIDEOS_MESSAGE

    def test_permission_denied_on_videos(self, seeded_db):
        seeded_db.fail_reads(VIDEOS_COLLECTION, google_exceptions.PermissionDenied("Missing or insufficient permissions."))

        with pytest.raises(PermissionDeniedError):
            list_videos(VideoQuery(), seeded_db)

    def test_documents_with_non_string_fields(self, seeded_db):
        """A timestamp date and a numeric level are listed, not rejected"""
        seeded_db.seed(VIDEOS_COLLECTION, "legacy", {
            "title": "Legacy Upload", "date": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "level": 3, "coachId": "bob",
        })

        listing = list_videos(VideoQuery(), seeded_db)

        legacy = listing.videos[0]
        assert legacy.id == "legacy"
        assert legacy.date == "2024-01-01"
        assert legacy.level == "3"
        assert legacy.coach.name == "bob"
        assert listing.total == 5


class TestCategories:
    """Test category grouping and lookup"""

    def test_group_by_first_appearance(self, seeded_db):
        listing = list_videos_by_category(VideoQuery(), seeded_db)

        assert list(listing.categories) == ["React", "CSS", "HTML"]
        assert [video.id for video in listing.categories["CSS"]] == ["css-flexbox", "css-grid"]

    def test_missing_category_grouped(self):
        groups = group_by_category(join_coaches([{"id": "x", "date": "2023-01-01"}], []))
        assert list(groups) == ["Uncategorized"]

    def test_get_videos_by_category_newest_first(self, seeded_db):
        videos = get_videos_by_category("CSS", seeded_db)
        assert [video.id for video in videos] == ["css-flexbox", "css-grid"]

    def test_unknown_category_is_empty(self, seeded_db):
        assert get_videos_by_category("Rust", seeded_db) == []


class TestCoachVideos:
    """Test per-coach video lookup"""

    def test_coach_id_match_skips_fallback(self, seeded_db):
        videos = get_videos_by_coach("bob", seeded_db)

        assert sorted(video["id"] for video in videos) == ["css-flexbox", "css-grid"]
        assert seeded_db.queries_on(VIDEOS_COLLECTION) == [(("coachId", "==", "bob"),)]

    def test_teacher_id_fallback_only_when_empty(self, fake_db):
        fake_db.seed(VIDEOS_COLLECTION, "legacy", {"title": "Legacy", "date": "2022-01-01", "teacherId": "t1"})

        videos = get_videos_by_coach("t1", fake_db)

        assert [video["id"] for video in videos] == ["legacy"]
        assert fake_db.queries_on(VIDEOS_COLLECTION) == [
            (("coachId", "==", "t1"),),
            (("teacherId", "==", "t1"),),
        ]

    def test_list_coach_videos_filtered(self, seeded_db):
        coach = Coach(id="bob", name="bob")
        listing = list_coach_videos(coach, VideoQuery(tag="Live Session", sort="oldest"), seeded_db)

        assert [video.id for video in listing.videos] == ["css-grid", "css-flexbox"]
        assert all(video.coach == coach for video in listing.videos)

    def test_coach_without_videos(self, seeded_db):
        listing = list_coach_videos(Coach(id="nobody", name="Nobody"), VideoQuery(), seeded_db)
        assert listing.message == "This coach has no recorded sessions yet."


class TestVideoMutations:
    """Test admin video writes"""

    def make_video(self, **overrides):
        fields = {
            "title": "TypeScript Generics",
            "video_url": "https://www.youtube.com/watch?v=abc",
            "date": "2024-02-02",
            "category": "TypeScript",
            "coach_id": "  bob  ",
        }
        fields.update(overrides)
        return VideoCreate(**fields)

    def test_add_video(self, seeded_db):
        video_id = add_video(self.make_video(), seeded_db)

        assert video_id == "typescript-generics"
        stored = seeded_db.data[VIDEOS_COLLECTION][video_id]
        assert stored["coachId"] == "bob"
        assert stored["videoUrl"] == "https://www.youtube.com/watch?v=abc"
        assert stored["level"] == "Level 1"
        assert stored["tag"] == "Recommended by Coach"

    def test_added_video_is_listed_with_coach(self, seeded_db):
        add_video(self.make_video(), seeded_db)

        first = list_videos(VideoQuery(), seeded_db).videos[0]

        assert first.id == "typescript-generics"
        assert first.coach.id == "bob"

    def test_add_duplicate_rejected(self, seeded_db):
        with pytest.raises(ValueError):
            add_video(self.make_video(title="CSS Grid"), seeded_db)

    def test_update_writes_only_given_fields(self, seeded_db):
        update_video("css-grid", VideoUpdate(level="Level 3"), seeded_db)

        stored = seeded_db.data[VIDEOS_COLLECTION]["css-grid"]
        assert stored["level"] == "Level 3"
        assert stored["title"] == "CSS Grid"

    def test_update_without_fields_rejected(self, seeded_db):
        with pytest.raises(ValueError):
            update_video("css-grid", VideoUpdate(), seeded_db)

    def test_update_missing_video(self, seeded_db):
        with pytest.raises(NotFoundError):
            update_video("nope", VideoUpdate(title="x"), seeded_db)

    def test_delete_video(self, seeded_db):
        delete_video("css-grid", seeded_db)
        assert "css-grid" not in seeded_db.data[VIDEOS_COLLECTION]

    def test_delete_missing_video(self, seeded_db):
        with pytest.raises(NotFoundError):
            delete_video("nope", seeded_db)

    def test_add_video_leaves_users_untouched(self, seeded_db):
        before = dict(seeded_db.data[USERS_COLLECTION])
        add_video(self.make_video(), seeded_db)
        assert seeded_db.data[USERS_COLLECTION] == before

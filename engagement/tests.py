import threading
from io import StringIO
from unittest.mock import patch
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.db import connection
from django.test import TestCase, TransactionTestCase, skipUnlessDBFeature
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.test import APITestCase
from comments.models import Comment
from followers.models import Follow, FollowStatus
from notifications.models import Notification, NotificationKind, NotificationPreference
from posts.models import Post
from profiles.models import Visibility
from .models import Like, Save
from .services import LIKE, SAVE, reconcile_counters, toggle_engagement
from .tasks import reconcile_engagement_counters

User = get_user_model()


class ToggleEngagementTests(TestCase):

    def setUp(self):
        self.author = User.objects.create_user(email='author@example.com', profile_name='author', password='pass12345')
        self.fan = User.objects.create_user(email='fan@example.com', profile_name='fan', password='pass12345')
        self.post = Post.objects.create(author=self.author, content="Finals tomorrow")

    def assertConsistent(self):
        self.post.refresh_from_db()
        self.assertEqual(self.post.likes_count, Like.objects.filter(post=self.post).count())
        self.assertEqual(self.post.saves_count, Save.objects.filter(post=self.post).count())

    def test_like_then_unlike(self):
        result = toggle_engagement(LIKE, self.post.pk, self.fan)
        self.assertEqual((result.active, result.count), (True, 1))
        result = toggle_engagement(LIKE, self.post.pk, self.fan)
        self.assertEqual((result.active, result.count), (False, 0))
        self.assertConsistent()

    def test_odd_and_even_toggles(self):
        """An odd number of toggles leaves one membership, an even number restores the baseline."""
        for expected in (1, 0, 1, 0, 1):
            self.assertEqual(toggle_engagement(SAVE, self.post.pk, self.fan).count, expected)
        self.assertEqual(Save.objects.filter(post=self.post, user=self.fan).count(), 1)
        self.assertConsistent()

    def test_racing_duplicate_add_counts_once(self):
        """A second add that loses the race to the unique constraint does not bump the counter."""
        toggle_engagement(LIKE, self.post.pk, self.fan)
        # Simulate the second request having checked for the row before the first one committed it.
        with patch('engagement.services._remove_membership', return_value=0):
            result = toggle_engagement(LIKE, self.post.pk, self.fan)
        self.assertEqual((result.active, result.count), (True, 1))
        self.assertEqual(Like.objects.filter(post=self.post, user=self.fan).count(), 1)
        self.assertConsistent()

    def test_like_notifies_owner_once(self):
        toggle_engagement(LIKE, self.post.pk, self.fan)
        toggle_engagement(LIKE, self.post.pk, self.fan)
        toggle_engagement(LIKE, self.post.pk, self.fan)
        self.assertEqual(Notification.objects.filter(
            recipient=self.author, actor=self.fan, kind=NotificationKind.LIKE, post=self.post
        ).count(), 1)

    def test_self_like_does_not_notify(self):
        toggle_engagement(LIKE, self.post.pk, self.author)
        self.assertFalse(Notification.objects.exists())

    def test_muted_likes_are_not_written(self):
        NotificationPreference.objects.create(user=self.author, likes_enabled=False)
        toggle_engagement(LIKE, self.post.pk, self.fan)
        self.assertFalse(Notification.objects.exists())
        self.assertConsistent()

    def test_save_never_notifies(self):
        toggle_engagement(SAVE, self.post.pk, self.fan)
        self.assertFalse(Notification.objects.exists())

    def test_invisible_post_cannot_be_engaged(self):
        private = Post.objects.create(author=self.author, content="secret", visibility=Visibility.PRIVATE)
        self.author.profile.visibility = Visibility.PRIVATE
        self.author.profile.save()
        with self.assertRaises(NotFound):
            toggle_engagement(LIKE, private.pk, self.fan)
        Follow.objects.create(follower=self.fan, followed=self.author, status=FollowStatus.ACCEPTED)
        self.assertTrue(toggle_engagement(LIKE, private.pk, self.fan).active)

    def test_unknown_kind(self):
        with self.assertRaises(ValidationError):
            toggle_engagement("cheer", self.post.pk, self.fan)

    def test_counter_never_goes_negative(self):
        Like.objects.create(post=self.post, user=self.fan)
        result = toggle_engagement(LIKE, self.post.pk, self.fan)
        self.assertEqual((result.active, result.count), (False, 0))

    def test_post_deleted_after_visibility_check_is_not_found(self):
        stale = Post.objects.get(pk=self.post.pk)
        Post.objects.filter(pk=self.post.pk).delete()
        with patch('engagement.services.get_visible_post_or_404', return_value=stale):
            with self.assertRaises(NotFound):
                toggle_engagement(LIKE, stale.pk, self.fan)
        self.assertFalse(Like.objects.exists())
        self.assertFalse(Notification.objects.exists())


@skipUnlessDBFeature('has_select_for_update')
class ConcurrentToggleTests(TransactionTestCase):
    """Two requests toggling the same like at once leave counter and rows in agreement."""

    def setUp(self):
        self.author = User.objects.create_user(email='author@example.com', profile_name='author', password='pass12345')
        self.fan = User.objects.create_user(email='fan@example.com', profile_name='fan', password='pass12345')
        self.post = Post.objects.create(author=self.author, content="Heat sheets are out")

    def test_simultaneous_toggles_stay_consistent(self):
        barrier = threading.Barrier(2)
        results, errors = [], []

        def toggle():
            try:
                barrier.wait()
                results.append(toggle_engagement(LIKE, self.post.pk, self.fan))
            except Exception as exc:
                errors.append(exc)
            finally:
                connection.close()

        threads = [threading.Thread(target=toggle) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(sorted(result.active for result in results), [False, True])
        self.post.refresh_from_db()
        self.assertEqual(self.post.likes_count, Like.objects.filter(post=self.post).count())
        self.assertEqual(self.post.likes_count, 0)


class ReconcileCountersTests(TestCase):

    def setUp(self):
        self.author = User.objects.create_user(email='author@example.com', profile_name='author', password='pass12345')
        self.fan = User.objects.create_user(email='fan@example.com', profile_name='fan', password='pass12345')
        self.post = Post.objects.create(author=self.author, content="Relay results")
        self.clean_post = Post.objects.create(author=self.author, content="Nothing here")
        toggle_engagement(LIKE, self.post.pk, self.fan)
        toggle_engagement(SAVE, self.post.pk, self.fan)

    def test_repairs_drifted_counters(self):
        Comment.objects.create(post=self.post, author=self.fan, content="Great run")
        Post.objects.filter(pk=self.post.pk).update(likes_count=5, saves_count=0)
        self.assertEqual(reconcile_counters(), 1)
        self.post.refresh_from_db()
        self.assertEqual((self.post.likes_count, self.post.saves_count, self.post.comments_count), (1, 1, 1))

    def test_consistent_counters_untouched(self):
        self.assertEqual(reconcile_counters(), 0)

    def test_restricted_to_given_posts(self):
        Post.objects.filter(pk=self.post.pk).update(likes_count=9)
        self.assertEqual(reconcile_counters(post_ids=[self.clean_post.pk]), 0)
        self.assertEqual(reconcile_counters(post_ids=[self.post.pk]), 1)

    def test_task(self):
        Post.objects.filter(pk=self.post.pk).update(saves_count=3)
        self.assertEqual(reconcile_engagement_counters(), "Repaired counters on 1 posts")

    def test_management_command(self):
        Post.objects.filter(pk=self.post.pk).update(likes_count=0)
        out = StringIO()
        call_command('reconcile_counters', '--post', str(self.post.pk), stdout=out)
        self.assertIn("Repaired counters on 1 posts.", out.getvalue())
        self.post.refresh_from_db()
        self.assertEqual(self.post.likes_count, 1)


class EngagementApiTests(APITestCase):

    def setUp(self):
        self.author = User.objects.create_user(email='author@example.com', profile_name='author', password='pass12345')
        self.fan = User.objects.create_user(email='fan@example.com', profile_name='fan', password='pass12345')
        self.post = Post.objects.create(author=self.author, content="Podium!")
        self.client.force_authenticate(user=self.fan)

    def test_like_toggle_endpoint(self):
        url = reverse('post-like', kwargs={'pk': self.post.pk})
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {'active': True, 'count': 1})
        response = self.client.post(url)
        self.assertEqual(response.data['data'], {'active': False, 'count': 0})

    def test_toggle_on_missing_post(self):
        response = self.client.post(reverse('post-save', kwargs={'pk': 999999}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_toggle_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(reverse('post-like', kwargs={'pk': self.post.pk}))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_saved_list_only_shows_visible_posts(self):
        """A saved post whose owner later went private drops out of the saved list."""
        other = User.objects.create_user(email='other@example.com', profile_name='other', password='pass12345')
        hidden = Post.objects.create(author=other, content="Was public")
        self.client.post(reverse('post-save', kwargs={'pk': self.post.pk}))
        self.client.post(reverse('post-save', kwargs={'pk': hidden.pk}))
        other.profile.visibility = Visibility.PRIVATE
        other.profile.save()

        response = self.client.get(reverse('saved-posts'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data['results']], [self.post.pk])

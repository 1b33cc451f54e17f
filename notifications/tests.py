from datetime import timedelta
from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase
from followers.models import Follow
from posts.models import Post
from .dispatcher import build_idempotency_key, dispatch, list_notifications, mark_follow_request_action, mark_read
from .models import ActionStatus, Notification, NotificationKind, NotificationPreference
from .tasks import cleanup_old_notifications

User = get_user_model()


class DispatcherTests(TestCase):

    def setUp(self):
        self.recipient = User.objects.create_user(email='coach@example.com', profile_name='coach', password='pass12345')
        self.actor = User.objects.create_user(email='runner@example.com', profile_name='runner', password='pass12345')
        self.post = Post.objects.create(author=self.recipient, content="Intervals")

    def test_dispatch_creates_notification(self):
        notification = dispatch(self.recipient.pk, self.actor.pk, NotificationKind.LIKE, post=self.post)
        self.assertEqual(notification.title, "runner liked your post")
        self.assertFalse(notification.is_read)
        self.assertIsNone(notification.action_status)
        self.assertEqual(
            notification.idempotency_key,
            build_idempotency_key(self.recipient.pk, self.actor.pk, NotificationKind.LIKE, self.post.pk),
        )

    def test_replay_returns_existing_notification(self):
        """Replaying the same trigger never produces a second notification."""
        first = dispatch(self.recipient.pk, self.actor.pk, NotificationKind.LIKE, post=self.post)
        second = dispatch(self.recipient.pk, self.actor.pk, NotificationKind.LIKE, post=self.post)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(Notification.objects.count(), 1)

    def test_key_includes_comment(self):
        key = build_idempotency_key(self.recipient.pk, self.actor.pk, NotificationKind.COMMENT, self.post.pk, None, 7)
        self.assertEqual(key, f"{self.recipient.pk}:{self.actor.pk}:comment:{self.post.pk}:-:7")

    def test_self_notification_suppressed(self):
        self.assertIsNone(dispatch(self.actor.pk, self.actor.pk, NotificationKind.LIKE, post=self.post))
        self.assertFalse(Notification.objects.exists())

    def test_muted_kind_not_written(self):
        NotificationPreference.objects.create(user=self.recipient, new_followers_enabled=False)
        self.assertIsNone(dispatch(self.recipient.pk, self.actor.pk, NotificationKind.NEW_FOLLOWER))
        self.assertFalse(Notification.objects.exists())
        self.assertIsNotNone(dispatch(self.recipient.pk, self.actor.pk, NotificationKind.LIKE, post=self.post))

    def test_preferences_created_lazily(self):
        self.assertFalse(NotificationPreference.objects.exists())
        dispatch(self.recipient.pk, self.actor.pk, NotificationKind.LIKE, post=self.post)
        self.assertTrue(NotificationPreference.objects.get(user=self.recipient).likes_enabled)

    def test_unknown_kind_always_enabled(self):
        NotificationPreference.objects.create(
            user=self.recipient, likes_enabled=False, comments_enabled=False,
            follow_requests_enabled=False, follow_accepted_enabled=False, new_followers_enabled=False,
        )
        notification = dispatch(self.recipient.pk, self.actor.pk, "mention", post=self.post)
        self.assertEqual(notification.title, "runner interacted with you")

    def test_follow_request_tracks_action(self):
        follow = Follow.objects.create(follower=self.actor, followed=self.recipient)
        notification = dispatch(self.recipient.pk, self.actor.pk, NotificationKind.FOLLOW_REQUEST, follow=follow)
        self.assertEqual(notification.action_status, ActionStatus.PENDING)
        mark_follow_request_action(follow, ActionStatus.DECLINED)
        notification.refresh_from_db()
        self.assertEqual(notification.action_status, ActionStatus.DECLINED)
        self.assertIsNotNone(notification.action_taken_at)

    def test_notification_survives_edge_deletion(self):
        follow = Follow.objects.create(follower=self.actor, followed=self.recipient)
        notification = dispatch(self.recipient.pk, self.actor.pk, NotificationKind.FOLLOW_REQUEST, follow=follow)
        follow.delete()
        notification.refresh_from_db()
        self.assertIsNone(notification.follow)

    def test_list_notifications_newest_first_and_unread_only(self):
        older = dispatch(self.recipient.pk, self.actor.pk, NotificationKind.LIKE, post=self.post)
        Notification.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(hours=1))
        newer = dispatch(self.recipient.pk, self.actor.pk, NotificationKind.NEW_FOLLOWER)
        dispatch(self.actor.pk, self.recipient.pk, NotificationKind.NEW_FOLLOWER)
        self.assertEqual(list(list_notifications(self.recipient)), [newer, older])
        mark_read(self.recipient, [newer.pk])
        self.assertEqual(list(list_notifications(self.recipient, unread_only=True)), [older])

    def test_deleting_post_removes_its_notifications(self):
        dispatch(self.recipient.pk, self.actor.pk, NotificationKind.LIKE, post=self.post)
        self.post.delete()
        self.assertFalse(Notification.objects.exists())


class CleanupTaskTests(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(email='user@example.com', profile_name='user', password='pass12345')
        self.actor = User.objects.create_user(email='actor@example.com', profile_name='actor', password='pass12345')

    def make(self, key, is_read, age_days):
        return Notification.objects.create(
            recipient=self.user, actor=self.actor, kind=NotificationKind.NEW_FOLLOWER, title="t",
            idempotency_key=key, is_read=is_read, created_at=timezone.now() - timedelta(days=age_days),
        )

    @override_settings(NOTIFICATION_RETENTION_DAYS=90)
    def test_cleanup_old_read_notifications(self):
        """Only read notifications past the retention window are removed."""
        old_read = self.make("a", True, 120)
        old_unread = self.make("b", False, 120)
        recent_read = self.make("c", True, 10)
        self.assertEqual(cleanup_old_notifications(), "Deleted 1 notifications")
        remaining = set(Notification.objects.values_list("id", flat=True))
        self.assertEqual(remaining, {old_unread.id, recent_read.id})
        self.assertNotIn(old_read.id, remaining)


class NotificationApiTests(APITestCase):

    def setUp(self):
        self.user = User.objects.create_user(email='user@example.com', profile_name='user', password='pass12345')
        self.other = User.objects.create_user(email='other@example.com', profile_name='other', password='pass12345')
        self.notifications = [
            Notification.objects.create(
                recipient=self.user, actor=self.other, kind=NotificationKind.LIKE, title=f"n{i}",
                idempotency_key=f"k{i}", created_at=timezone.now() - timedelta(minutes=i),
            )
            for i in range(3)
        ]
        self.foreign = Notification.objects.create(
            recipient=self.other, actor=self.user, kind=NotificationKind.LIKE, title="theirs", idempotency_key="x"
        )
        self.client.force_authenticate(user=self.user)

    def test_list_newest_first_with_unread_count(self):
        response = self.client.get(reverse('notification-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['title'] for row in response.data['results']], ["n0", "n1", "n2"])
        self.assertEqual(response.data['unread_count'], 3)
        self.assertIn('next', response.data)

    def test_cursor_pagination(self):
        response = self.client.get(reverse('notification-list'), {'page_size': 2})
        self.assertEqual(len(response.data['results']), 2)
        response = self.client.get(response.data['next'])
        self.assertEqual([row['title'] for row in response.data['results']], ["n2"])

    def test_unread_only_filter(self):
        self.notifications[0].mark_as_read()
        response = self.client.get(reverse('notification-list'), {'unread_only': 'true'})
        self.assertEqual([row['title'] for row in response.data['results']], ["n1", "n2"])
        self.assertEqual(response.data['unread_count'], 2)

    def test_mark_read_only_touches_own_notifications(self):
        ids = [self.notifications[0].id, self.notifications[1].id, self.foreign.id]
        response = self.client.post(reverse('mark-notifications-read'), {'ids': ids}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['updated_count'], 2)
        self.foreign.refresh_from_db()
        self.assertFalse(self.foreign.is_read)

    def test_mark_read_requires_ids(self):
        response = self.client.post(reverse('mark-notifications-read'), {'ids': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_mark_all_read(self):
        response = self.client.patch(reverse('mark-all-notifications-read'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['updated_count'], 3)
        response = self.client.get(reverse('notification-unread-count'))
        self.assertEqual(response.data['data']['unread_count'], 0)

    def test_delete_own_notification(self):
        response = self.client.delete(reverse('delete-notification', kwargs={'pk': self.notifications[0].id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Notification.objects.filter(pk=self.notifications[0].id).exists())

    def test_cannot_delete_foreign_notification(self):
        response = self.client.delete(reverse('delete-notification', kwargs={'pk': self.foreign.id}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Notification.objects.filter(pk=self.foreign.id).exists())

    def test_preferences_get_and_patch(self):
        url = reverse('notification-preferences')
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['likes_enabled'])
        response = self.client.patch(url, {'likes_enabled': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['data']['likes_enabled'])
        self.assertFalse(NotificationPreference.objects.get(user=self.user).likes_enabled)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.get(reverse('notification-list')).status_code, status.HTTP_401_UNAUTHORIZED)

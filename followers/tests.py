from unittest.mock import patch
from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from backend.exceptions import AlreadyExists, Forbidden, InvalidSelfFollow, InvalidState
from notifications.models import ActionStatus, Notification, NotificationKind
from profiles.models import Profile, Visibility
from .models import Follow, FollowStatus
from .services import reconcile_follow_counts, remove_follower, request_follow, respond_follow, unfollow
from .tasks import reconcile_follow_counts_task

User = get_user_model()


class FollowServiceTests(TestCase):
    """State machine of follow edges and their counters."""

    def setUp(self):
        self.athlete = User.objects.create_user(email='athlete@example.com', profile_name='athlete', password='pass12345')
        self.coach = User.objects.create_user(
            email='coach@example.com', profile_name='coach', password='pass12345', visibility=Visibility.PRIVATE
        )
        self.fan = User.objects.create_user(email='fan@example.com', profile_name='fan', password='pass12345')

    def counts(self, user):
        profile = Profile.objects.get(user=user)
        return profile.follower_count, profile.following_count

    def test_follow_public_profile_is_accepted(self):
        follow = request_follow(self.fan, self.athlete.pk)
        self.assertEqual(follow.status, FollowStatus.ACCEPTED)
        self.assertEqual(self.counts(self.athlete), (1, 0))
        self.assertEqual(self.counts(self.fan), (0, 1))
        self.assertTrue(Notification.objects.filter(
            recipient=self.athlete, actor=self.fan, kind=NotificationKind.NEW_FOLLOWER
        ).exists())

    def test_follow_private_profile_is_pending(self):
        """Pending requests do not count as followers and notify with the message."""
        follow = request_follow(self.fan, self.coach.pk, "Big fan of your program")
        self.assertEqual(follow.status, FollowStatus.PENDING)
        self.assertEqual(self.counts(self.coach), (0, 0))
        notification = Notification.objects.get(recipient=self.coach, kind=NotificationKind.FOLLOW_REQUEST)
        self.assertEqual(notification.action_status, ActionStatus.PENDING)
        self.assertEqual(notification.message, "Big fan of your program")

    def test_self_follow_rejected(self):
        with self.assertRaises(InvalidSelfFollow):
            request_follow(self.fan, self.fan.pk)
        self.assertFalse(Follow.objects.exists())

    def test_duplicate_follow_conflicts(self):
        request_follow(self.fan, self.coach.pk)
        with self.assertRaises(AlreadyExists):
            request_follow(self.fan, self.coach.pk)
        self.assertEqual(Notification.objects.filter(kind=NotificationKind.FOLLOW_REQUEST).count(), 1)

    def test_racing_duplicate_insert_conflicts(self):
        """A unique violation from a concurrent insert surfaces as a conflict."""
        with patch('followers.services.Follow.objects.create', side_effect=IntegrityError):
            with self.assertRaises(AlreadyExists):
                request_follow(self.fan, self.athlete.pk)
        self.assertEqual(self.counts(self.athlete), (0, 0))

    def test_accept_request(self):
        follow = request_follow(self.fan, self.coach.pk)
        result = respond_follow(follow.pk, self.coach, "accept")
        self.assertEqual(result.status, FollowStatus.ACCEPTED)
        self.assertEqual(self.counts(self.coach), (1, 0))
        self.assertEqual(self.counts(self.fan), (0, 1))
        request = Notification.objects.get(kind=NotificationKind.FOLLOW_REQUEST)
        self.assertEqual(request.action_status, ActionStatus.ACCEPTED)
        self.assertIsNotNone(request.action_taken_at)
        self.assertTrue(Notification.objects.filter(
            recipient=self.fan, actor=self.coach, kind=NotificationKind.FOLLOW_ACCEPTED
        ).exists())

    def test_reject_deletes_edge_and_allows_new_request(self):
        follow = request_follow(self.fan, self.coach.pk)
        result = respond_follow(follow.pk, self.coach, "reject")
        self.assertEqual(result.status, FollowStatus.REJECTED)
        self.assertFalse(Follow.objects.exists())
        self.assertEqual(
            Notification.objects.get(kind=NotificationKind.FOLLOW_REQUEST).action_status, ActionStatus.DECLINED
        )
        again = request_follow(self.fan, self.coach.pk)
        self.assertEqual(again.status, FollowStatus.PENDING)

    def test_only_target_can_respond(self):
        follow = request_follow(self.fan, self.coach.pk)
        with self.assertRaises(Forbidden):
            respond_follow(follow.pk, self.fan, "accept")

    def test_responding_twice_is_invalid(self):
        follow = request_follow(self.fan, self.coach.pk)
        respond_follow(follow.pk, self.coach, "accept")
        with self.assertRaises(InvalidState):
            respond_follow(follow.pk, self.coach, "reject")
        self.assertEqual(self.counts(self.coach), (1, 0))

    def test_unfollow_accepted_edge(self):
        request_follow(self.fan, self.athlete.pk)
        self.assertTrue(unfollow(self.fan, self.athlete.pk))
        self.assertEqual(self.counts(self.athlete), (0, 0))
        self.assertEqual(self.counts(self.fan), (0, 0))

    def test_unfollow_absent_edge_is_noop(self):
        self.assertFalse(unfollow(self.fan, self.athlete.pk))

    def test_withdrawing_request_removes_pending_notification(self):
        request_follow(self.fan, self.coach.pk)
        self.assertTrue(unfollow(self.fan, self.coach.pk))
        self.assertFalse(Notification.objects.filter(kind=NotificationKind.FOLLOW_REQUEST).exists())
        self.assertEqual(self.counts(self.coach), (0, 0))

    def test_remove_follower(self):
        request_follow(self.fan, self.athlete.pk)
        self.assertTrue(remove_follower(self.athlete, self.fan.pk))
        self.assertFalse(Follow.objects.exists())
        self.assertEqual(self.counts(self.athlete), (0, 0))
        self.assertFalse(remove_follower(self.athlete, self.fan.pk))

    def test_reconcile_repairs_drifted_counts(self):
        request_follow(self.fan, self.athlete.pk)
        Profile.objects.filter(user=self.athlete).update(follower_count=7)
        Profile.objects.filter(user=self.coach).update(following_count=3)
        self.assertEqual(reconcile_follow_counts(), 2)
        self.assertEqual(self.counts(self.athlete), (1, 0))
        self.assertEqual(self.counts(self.coach), (0, 0))
        self.assertEqual(reconcile_follow_counts(), 0)

    def test_reconcile_task(self):
        Profile.objects.filter(user=self.fan).update(follower_count=2)
        self.assertEqual(reconcile_follow_counts_task(), "Repaired follow counters on 1 profiles")


class FollowApiTests(APITestCase):
    """Test suite for the follower endpoints."""

    def setUp(self):
        self.user1 = User.objects.create_user(email='testuser@example.com', profile_name='testuser', password='testpass123')
        self.user2 = User.objects.create_user(
            email='otheruser@example.com', profile_name='otheruser', password='otherpass123',
            visibility=Visibility.PRIVATE,
        )
        self.user3 = User.objects.create_user(email='third@example.com', profile_name='third', password='thirdpass123')
        self.follow_url = reverse('follow')
        self.client.force_authenticate(user=self.user1)

    def test_follow_public_user(self):
        """Test successful follow action."""
        response = self.client.post(self.follow_url, {'followed': self.user3.id})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], FollowStatus.ACCEPTED)
        self.user3.profile.refresh_from_db()
        self.assertEqual(self.user3.profile.follower_count, 1)

    def test_follow_private_user_sends_request(self):
        response = self.client.post(self.follow_url, {'followed': self.user2.id, 'message': 'Hi coach'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], FollowStatus.PENDING)
        self.assertEqual(response.data['message'], "Follow request sent.")

    def test_follow_self_fails(self):
        """Test that a user cannot follow themselves."""
        response = self.client.post(self.follow_url, {'followed': self.user1.id})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['type'], 'error')

    def test_duplicate_follow_conflicts(self):
        Follow.objects.create(follower=self.user1, followed=self.user3, status=FollowStatus.ACCEPTED)
        response = self.client.post(self.follow_url, {'followed': self.user3.id})
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_invalid_followed_id(self):
        """Test that providing an invalid user ID for following fails."""
        response = self.client.post(self.follow_url, {'followed': 9999})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], "The user you're trying to follow doesn't exist.")

    def test_follow_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(self.follow_url, {'followed': self.user3.id})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_unfollow(self):
        self.client.post(self.follow_url, {'followed': self.user3.id})
        response = self.client.delete(reverse('unfollow', kwargs={'user_id': self.user3.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['data']['removed'])
        self.assertFalse(Follow.objects.filter(follower=self.user1, followed=self.user3).exists())

    def test_unfollow_not_following_succeeds(self):
        response = self.client.delete(reverse('unfollow', kwargs={'user_id': self.user3.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['data']['removed'])

    def test_pending_requests_and_accept(self):
        follow = Follow.objects.create(follower=self.user1, followed=self.user2)
        self.client.force_authenticate(user=self.user2)
        response = self.client.get(reverse('follow_requests'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data['results']], [follow.id])

        response = self.client.post(
            reverse('follow_request_respond', kwargs={'pk': follow.id}), {'decision': 'accept'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {'id': follow.id, 'state': FollowStatus.ACCEPTED})

    def test_reject_request(self):
        follow = Follow.objects.create(follower=self.user1, followed=self.user2)
        self.client.force_authenticate(user=self.user2)
        response = self.client.post(
            reverse('follow_request_respond', kwargs={'pk': follow.id}), {'decision': 'reject'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['state'], FollowStatus.REJECTED)
        self.assertFalse(Follow.objects.exists())

    def test_requester_cannot_respond(self):
        follow = Follow.objects.create(follower=self.user1, followed=self.user2)
        response = self.client.post(
            reverse('follow_request_respond', kwargs={'pk': follow.id}), {'decision': 'accept'}
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_invalid_decision(self):
        follow = Follow.objects.create(follower=self.user1, followed=self.user2)
        self.client.force_authenticate(user=self.user2)
        response = self.client.post(
            reverse('follow_request_respond', kwargs={'pk': follow.id}), {'decision': 'maybe'}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_remove_follower(self):
        Follow.objects.create(follower=self.user3, followed=self.user1, status=FollowStatus.ACCEPTED)
        response = self.client.delete(reverse('remove_follower', kwargs={'user_id': self.user3.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['data']['removed'])

    def test_follower_list_of_public_user(self):
        Follow.objects.create(follower=self.user3, followed=self.user1, status=FollowStatus.ACCEPTED)
        Follow.objects.create(follower=self.user2, followed=self.user1, status=FollowStatus.PENDING)
        response = self.client.get(reverse('user_followers', kwargs={'user_id': self.user1.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [(row['user_id'], row['profile_name']) for row in response.data['results']],
            [(self.user3.id, 'third')],
        )

    def test_following_list(self):
        Follow.objects.create(follower=self.user1, followed=self.user3, status=FollowStatus.ACCEPTED)
        response = self.client.get(reverse('user_following', kwargs={'user_id': self.user1.id}))
        self.assertEqual([row['user_id'] for row in response.data['results']], [self.user3.id])

    def test_follower_list_of_private_user_is_restricted(self):
        response = self.client.get(reverse('user_followers', kwargs={'user_id': self.user2.id}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        Follow.objects.create(follower=self.user1, followed=self.user2, status=FollowStatus.ACCEPTED)
        response = self.client.get(reverse('user_followers', kwargs={'user_id': self.user2.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_follower_list_of_unknown_user(self):
        response = self.client.get(reverse('user_followers', kwargs={'user_id': 9999}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

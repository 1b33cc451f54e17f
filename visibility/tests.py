from unittest.mock import patch
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from followers.models import Follow, FollowStatus
from followers.services import request_follow, respond_follow, unfollow
from posts.models import Post
from profiles.models import Visibility
from .policy import FOLLOWER, ORGANIZATION, OWN_CONTENT, PUBLIC, can_view, resolve_access
from .services import NOT_CONNECTED, NOT_FOUND, can_view_post, check_profile_access, filter_visible

User = get_user_model()


class ResolveAccessTests(SimpleTestCase):
    """The evaluator is pure, so no database is needed."""

    def test_owner_always_sees_own_content(self):
        self.assertEqual(resolve_access(1, 1, "private", "private"), OWN_CONTENT)
        self.assertEqual(resolve_access(1, 1, "public", "private", "rejected"), OWN_CONTENT)

    def test_public_content_of_public_profile(self):
        self.assertEqual(resolve_access(2, 1, "public", "public"), PUBLIC)
        self.assertEqual(resolve_access(None, 1, "public", "public"), PUBLIC)

    def test_public_content_of_private_profile_needs_connection(self):
        self.assertIsNone(resolve_access(2, 1, "public", "private"))
        self.assertEqual(resolve_access(2, 1, "public", "private", "accepted"), FOLLOWER)

    def test_only_accepted_edges_grant_access(self):
        self.assertIsNone(resolve_access(2, 1, "private", "public", "pending"))
        self.assertIsNone(resolve_access(2, 1, "private", "public", "rejected"))
        self.assertEqual(resolve_access(2, 1, "private", "public", "accepted"), FOLLOWER)

    def test_shared_organization_grants_private_content(self):
        self.assertEqual(resolve_access(2, 1, "private", "private", None, True), ORGANIZATION)

    def test_rule_order_prefers_earlier_rules(self):
        """Follow beats organization when both apply; public beats both."""
        self.assertEqual(resolve_access(2, 1, "private", "private", "accepted", True), FOLLOWER)
        self.assertEqual(resolve_access(2, 1, "public", "public", "accepted", True), PUBLIC)

    def test_anonymous_viewer_only_gets_public(self):
        self.assertIsNone(resolve_access(None, 1, "private", "public", "accepted", True))
        self.assertFalse(can_view(None, 1, "public", "private"))


class VisibilityServiceTests(TestCase):

    def setUp(self):
        self.owner = User.objects.create_user(
            email='owner@example.com', profile_name='owner', password='pass12345', visibility=Visibility.PRIVATE
        )
        self.viewer = User.objects.create_user(email='viewer@example.com', profile_name='viewer', password='pass12345')
        self.colleague = User.objects.create_user(
            email='colleague@example.com', profile_name='colleague', password='pass12345'
        )
        self.private_post = Post.objects.create(author=self.owner, content="private", visibility=Visibility.PRIVATE)

    def test_private_post_hidden_without_connection(self):
        """A stranger cannot see private content of a private profile."""
        self.assertFalse(can_view_post(self.viewer, self.private_post.pk))

    def test_acceptance_grants_access(self):
        """Pending grants nothing; acceptance makes the post visible."""
        follow = request_follow(self.viewer, self.owner.pk)
        self.assertEqual(follow.status, FollowStatus.PENDING)
        self.assertFalse(can_view_post(self.viewer, self.private_post.pk))
        respond_follow(follow.pk, self.owner, "accept")
        self.assertTrue(can_view_post(self.viewer, self.private_post.pk))

    def test_shared_organization_grants_access(self):
        """Case and whitespace differences in organization tags still match."""
        self.owner.profile.set_organizations(["Stanford"])
        self.colleague.profile.set_organizations(["  stanford "])
        self.assertTrue(can_view_post(self.colleague, self.private_post.pk))
        self.assertFalse(can_view_post(self.viewer, self.private_post.pk))

    def test_unfollow_revokes_access(self):
        follow = request_follow(self.viewer, self.owner.pk)
        respond_follow(follow.pk, self.owner, "accept")
        unfollow(self.viewer, self.owner.pk)
        self.assertFalse(can_view_post(self.viewer, self.private_post.pk))

    def test_unfollow_keeps_access_through_organization(self):
        self.owner.profile.set_organizations(["Track Club"])
        self.viewer.profile.set_organizations(["track club"])
        Follow.objects.create(follower=self.viewer, followed=self.owner, status=FollowStatus.ACCEPTED)
        unfollow(self.viewer, self.owner.pk)
        self.assertTrue(can_view_post(self.viewer, self.private_post.pk))

    def test_owner_sees_own_private_post(self):
        self.assertTrue(can_view_post(self.owner, self.private_post.pk))

    def test_missing_post_is_not_visible(self):
        self.assertFalse(can_view_post(self.viewer, 999999))

    def test_anonymous_sees_only_public_posts_of_public_profiles(self):
        public_post = Post.objects.create(author=self.viewer, content="hello")
        visible = filter_visible(AnonymousUser(), [self.private_post, public_post])
        self.assertEqual(visible, [public_post])

    def test_filter_preserves_order_without_duplicates(self):
        posts = [
            Post.objects.create(author=self.viewer, content="a"),
            self.private_post,
            Post.objects.create(author=self.colleague, content="b"),
            Post.objects.create(author=self.viewer, content="c"),
        ]
        visible = filter_visible(self.colleague, posts)
        self.assertEqual(visible, [posts[0], posts[2], posts[3]])

    def test_batched_lookup_for_a_page(self):
        """50 posts from 10 private owners cost one query per lookup kind, not one per post."""
        owners = [
            User.objects.create_user(
                email=f'athlete{i}@example.com', profile_name=f'athlete{i}', password='pass12345',
                visibility=Visibility.PRIVATE,
            )
            for i in range(10)
        ]
        for owner in owners[:3]:
            Follow.objects.create(follower=self.viewer, followed=owner, status=FollowStatus.ACCEPTED)
        posts = list(Post.objects.bulk_create([
            Post(author=owners[i % 10], content=f"post {i}", visibility=Visibility.PRIVATE) for i in range(50)
        ]))
        # owner visibility, follow edges, shared organizations
        with self.assertNumQueries(3):
            visible = filter_visible(self.viewer, posts)
        self.assertEqual(len(visible), 15)

    def test_public_page_needs_no_relationship_lookup(self):
        posts = [Post.objects.create(author=self.colleague, content=str(i)) for i in range(5)]
        with self.assertNumQueries(1):
            self.assertEqual(filter_visible(self.viewer, posts), posts)

    def test_own_posts_need_no_queries(self):
        with self.assertNumQueries(0):
            self.assertEqual(filter_visible(self.owner, [self.private_post]), [self.private_post])

    def test_lookup_failure_denies(self):
        """A failing relationship lookup fails closed."""
        Follow.objects.create(follower=self.viewer, followed=self.owner, status=FollowStatus.ACCEPTED)
        with patch('visibility.services._edge_states', side_effect=DatabaseError("locked")):
            self.assertEqual(filter_visible(self.viewer, [self.private_post]), [])
            self.assertFalse(can_view_post(self.viewer, self.private_post.pk))

    def test_profile_access_decisions(self):
        self.assertEqual(check_profile_access(self.viewer, self.owner.pk).reason, NOT_CONNECTED)
        self.assertTrue(check_profile_access(self.viewer, self.owner.pk).limited_access)
        self.assertEqual(check_profile_access(self.owner, self.owner.pk).reason, OWN_CONTENT)
        self.assertEqual(check_profile_access(AnonymousUser(), self.viewer.pk).reason, PUBLIC)
        self.assertEqual(check_profile_access(self.viewer, 999999).reason, NOT_FOUND)


class PrivacyCheckViewTests(APITestCase):

    def setUp(self):
        self.owner = User.objects.create_user(
            email='owner@example.com', profile_name='owner', password='pass12345', visibility=Visibility.PRIVATE
        )
        self.viewer = User.objects.create_user(email='viewer@example.com', profile_name='viewer', password='pass12345')
        self.url = reverse('privacy_check', kwargs={'user_id': self.owner.pk})

    def test_stranger_gets_limited_access(self):
        self.client.force_authenticate(user=self.viewer)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {'can_view': False, 'limited_access': True, 'reason': NOT_CONNECTED})

    def test_follower_gets_full_access(self):
        Follow.objects.create(follower=self.viewer, followed=self.owner, status=FollowStatus.ACCEPTED)
        self.client.force_authenticate(user=self.viewer)
        response = self.client.get(self.url)
        self.assertEqual(response.data['data'], {'can_view': True, 'limited_access': False, 'reason': FOLLOWER})

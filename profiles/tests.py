from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from django.contrib.auth import get_user_model
from followers.models import Follow, FollowStatus
from profiles.models import OrganizationMembership, Profile, Visibility, normalize_organization_key

User = get_user_model()

class OrganizationTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email='user1@example.com', profile_name='user1', password='pass12345')

    def test_normalize_key(self):
        self.assertEqual(normalize_organization_key("  Stanford   Track  "), "stanford track")

    def test_set_organizations_replaces_tags(self):
        """Setting tags replaces the previous set and deduplicates by normalized key."""
        self.user.profile.set_organizations(["Stanford", "stanford ", "Bay FC"])
        self.assertEqual(self.user.profile.organization_keys, {"stanford", "bay fc"})
        self.user.profile.set_organizations(["Bay FC", "Oregon"])
        self.assertEqual(self.user.profile.organization_keys, {"bay fc", "oregon"})

    def test_membership_save_normalizes(self):
        membership = OrganizationMembership.objects.create(user=self.user, key="  UCLA  ")
        self.assertEqual(membership.key, "ucla")


class ProfileDetailViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user1 = User.objects.create_user(email='user1@example.com', profile_name='user1', password='pass12345')
        self.user2 = User.objects.create_user(
            email='user2@example.com', profile_name='user2', password='pass12345', visibility=Visibility.PRIVATE
        )
        self.user2.profile.bio = "Sprinter"
        self.user2.profile.save()
        self.public_url = reverse('profile_detail', kwargs={'user_id': self.user1.id})
        self.private_url = reverse('profile_detail', kwargs={'user_id': self.user2.id})

    def test_public_profile_visible_to_anonymous(self):
        response = self.client.get(self.public_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['profile_name'], 'user1')
        self.assertFalse(response.data['data']['limited_access'])
        self.assertEqual(response.data['data']['access_reason'], 'public')

    def test_private_profile_returns_limited_payload(self):
        """Strangers see only the name and visibility of a private profile."""
        self.client.force_authenticate(user=self.user1)
        response = self.client.get(self.private_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertTrue(data['limited_access'])
        self.assertEqual(data['access_reason'], 'not_connected')
        self.assertNotIn('bio', data)
        self.assertNotIn('follower_count', data)

    def test_private_profile_visible_to_follower(self):
        Follow.objects.create(follower=self.user1, followed=self.user2, status=FollowStatus.ACCEPTED)
        self.client.force_authenticate(user=self.user1)
        response = self.client.get(self.private_url)
        self.assertEqual(response.data['data']['bio'], 'Sprinter')
        self.assertEqual(response.data['data']['access_reason'], 'follower')

    def test_pending_follower_still_limited(self):
        Follow.objects.create(follower=self.user1, followed=self.user2, status=FollowStatus.PENDING)
        self.client.force_authenticate(user=self.user1)
        response = self.client.get(self.private_url)
        self.assertTrue(response.data['data']['limited_access'])

    def test_private_profile_visible_to_organization_member(self):
        self.user1.profile.set_organizations(["Stanford"])
        self.user2.profile.set_organizations(["STANFORD"])
        self.client.force_authenticate(user=self.user1)
        response = self.client.get(self.private_url)
        self.assertEqual(response.data['data']['access_reason'], 'organization')

    def test_unknown_profile(self):
        response = self.client.get(reverse('profile_detail', kwargs={'user_id': 9999}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_owner_updates_profile(self):
        """The owner can change bio, visibility and organizations."""
        self.client.force_authenticate(user=self.user1)
        response = self.client.patch(
            self.public_url,
            {'bio': 'Marathoner', 'visibility': 'private', 'organizations': ['Boston AC']},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        profile = Profile.objects.get(user=self.user1)
        self.assertEqual(profile.bio, 'Marathoner')
        self.assertTrue(profile.is_private)
        self.assertEqual(profile.organization_keys, {'boston ac'})
        self.assertEqual(response.data['data']['organization_keys'], ['boston ac'])

    def test_invalid_visibility_rejected(self):
        self.client.force_authenticate(user=self.user1)
        response = self.client.patch(self.public_url, {'visibility': 'friends'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_update_someone_elses_profile(self):
        self.client.force_authenticate(user=self.user1)
        Follow.objects.create(follower=self.user1, followed=self.user2, status=FollowStatus.ACCEPTED)
        response = self.client.patch(self.private_url, {'bio': 'hacked'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Profile.objects.get(user=self.user2).bio, 'Sprinter')

    def test_anonymous_cannot_update(self):
        response = self.client.patch(self.public_url, {'bio': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

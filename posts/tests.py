from django.contrib.auth import get_user_model
from django.urls import reverse

from rest_framework import status
from rest_framework.test import APITestCase

from followers.models import Follow, FollowStatus
from profiles.models import Visibility
from posts.models import Post

from .messages import STANDARD_MESSAGES

User = get_user_model()

class PostTests(APITestCase):
    """Tests for Post views and their visibility rules."""

    def setUp(self):
        self.author = User.objects.create_user(
            email='author@example.com', profile_name='author', password='pass12345', visibility=Visibility.PRIVATE
        )
        self.reader = User.objects.create_user(email='reader@example.com', profile_name='reader', password='pass12345')
        self.other = User.objects.create_user(email='other@example.com', profile_name='other', password='pass12345')
        self.private_post = Post.objects.create(author=self.author, content="Training log", visibility=Visibility.PRIVATE)
        self.public_post = Post.objects.create(author=self.reader, content="Race day!")
        self.list_url = reverse('post-list')

    def result_ids(self, response):
        return [row['id'] for row in response.data['results']]

    def test_create_post(self):
        """Test post creation by an authenticated user."""
        self.client.force_authenticate(user=self.reader)
        response = self.client.post(self.list_url, {'content': 'New PR', 'visibility': 'private'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], STANDARD_MESSAGES['POST_CREATED_SUCCESS']['message'])
        post = Post.objects.get(pk=response.data['data']['id'])
        self.assertEqual(post.author, self.reader)
        self.assertEqual(post.visibility, Visibility.PRIVATE)

    def test_create_post_requires_content(self):
        self.client.force_authenticate(user=self.reader)
        response = self.client.post(self.list_url, {'content': '   '})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_anonymous_cannot_create(self):
        response = self.client.post(self.list_url, {'content': 'Hello'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_feed_hides_private_posts_from_strangers(self):
        self.client.force_authenticate(user=self.other)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.result_ids(response), [self.public_post.id])
        self.assertNotIn('count', response.data)

    def test_feed_shows_private_posts_to_followers(self):
        Follow.objects.create(follower=self.other, followed=self.author, status=FollowStatus.ACCEPTED)
        self.client.force_authenticate(user=self.other)
        response = self.client.get(self.list_url)
        self.assertEqual(self.result_ids(response), [self.public_post.id, self.private_post.id])

    def test_feed_for_anonymous_viewer(self):
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.result_ids(response), [self.public_post.id])

    def test_author_timeline_filter(self):
        Post.objects.create(author=self.other, content="Other post")
        self.client.force_authenticate(user=self.author)
        response = self.client.get(self.list_url, {'author': self.author.id})
        self.assertEqual(self.result_ids(response), [self.private_post.id])

    def test_retrieve_visible_post(self):
        self.client.force_authenticate(user=self.other)
        response = self.client.get(reverse('post-detail', kwargs={'pk': self.public_post.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['content'], "Race day!")
        self.assertFalse(response.data['data']['is_owner'])

    def test_denied_post_looks_missing(self):
        """A hidden post answers exactly like a post that does not exist."""
        self.client.force_authenticate(user=self.other)
        denied = self.client.get(reverse('post-detail', kwargs={'pk': self.private_post.id}))
        missing = self.client.get(reverse('post-detail', kwargs={'pk': 999999}))
        self.assertEqual(denied.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(denied.data, missing.data)

    def test_owner_updates_post(self):
        self.client.force_authenticate(user=self.author)
        response = self.client.patch(
            reverse('post-detail', kwargs={'pk': self.private_post.id}), {'content': 'Updated'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.private_post.refresh_from_db()
        self.assertEqual(self.private_post.content, 'Updated')

    def test_non_owner_cannot_update(self):
        self.client.force_authenticate(user=self.other)
        response = self.client.patch(reverse('post-detail', kwargs={'pk': self.public_post.id}), {'content': 'x'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_owner_deletes_post(self):
        self.client.force_authenticate(user=self.reader)
        response = self.client.delete(reverse('post-detail', kwargs={'pk': self.public_post.id}))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Post.objects.filter(pk=self.public_post.id).exists())

    def test_counters_are_read_only(self):
        self.client.force_authenticate(user=self.reader)
        self.client.patch(reverse('post-detail', kwargs={'pk': self.public_post.id}), {'likes_count': 50})
        self.public_post.refresh_from_db()
        self.assertEqual(self.public_post.likes_count, 0)

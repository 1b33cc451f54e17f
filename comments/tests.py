from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APITestCase
from backend.exceptions import Forbidden
from notifications.models import Notification, NotificationKind
from posts.models import Post
from profiles.models import Visibility
from .models import Comment
from .services import create_comment, delete_comment

User = get_user_model()


class CommentServiceTests(TestCase):

    def setUp(self):
        self.author = User.objects.create_user(email='author@example.com', profile_name='author', password='pass12345')
        self.fan = User.objects.create_user(email='fan@example.com', profile_name='fan', password='pass12345')
        self.stranger = User.objects.create_user(email='stranger@example.com', profile_name='stranger', password='pass12345')
        self.post = Post.objects.create(author=self.author, content="Meet recap")

    def test_create_comment_updates_counter_and_notifies(self):
        comment = create_comment(self.post, self.fan, "  Congrats!  ")
        self.assertEqual(comment.content, "Congrats!")
        self.post.refresh_from_db()
        self.assertEqual(self.post.comments_count, 1)
        notification = Notification.objects.get(kind=NotificationKind.COMMENT)
        self.assertEqual((notification.recipient, notification.actor), (self.author, self.fan))
        self.assertEqual(notification.comment, comment)

    def test_blank_comment_rejected(self):
        with self.assertRaises(ValidationError):
            create_comment(self.post, self.fan, "   ")
        self.assertFalse(Comment.objects.exists())

    def test_commenting_on_own_post_does_not_notify(self):
        create_comment(self.post, self.author, "Thanks all")
        self.assertFalse(Notification.objects.exists())

    def test_delete_by_comment_author_or_post_owner(self):
        first = create_comment(self.post, self.fan, "One")
        second = create_comment(self.post, self.fan, "Two")
        delete_comment(first, self.fan)
        delete_comment(second, self.author)
        self.post.refresh_from_db()
        self.assertEqual(self.post.comments_count, 0)
        self.assertFalse(Comment.objects.exists())

    def test_delete_by_stranger_forbidden(self):
        comment = create_comment(self.post, self.fan, "Mine")
        with self.assertRaises(Forbidden):
            delete_comment(comment, self.stranger)
        self.post.refresh_from_db()
        self.assertEqual(self.post.comments_count, 1)

    def test_deleting_comment_removes_its_notification(self):
        comment = create_comment(self.post, self.fan, "Temporary")
        delete_comment(comment, self.fan)
        self.assertFalse(Notification.objects.exists())

    def test_each_comment_gets_its_own_notification(self):
        first = create_comment(self.post, self.fan, "Great race")
        second = create_comment(self.post, self.fan, "See you at nationals")
        notifications = Notification.objects.filter(kind=NotificationKind.COMMENT)
        self.assertEqual(notifications.count(), 2)
        self.assertEqual({n.comment_id for n in notifications}, {first.pk, second.pk})

        delete_comment(first, self.fan)
        remaining = Notification.objects.get(kind=NotificationKind.COMMENT)
        self.assertEqual(remaining.comment, second)
        self.assertEqual(remaining.message, "See you at nationals")

    def test_notification_message_is_truncated_preview(self):
        create_comment(self.post, self.fan, "x" * 250)
        notification = Notification.objects.get(kind=NotificationKind.COMMENT)
        self.assertEqual(len(notification.message), 100)
        self.assertTrue(notification.message.startswith("x" * 99))


class CommentApiTests(APITestCase):

    def setUp(self):
        self.author = User.objects.create_user(
            email='author@example.com', profile_name='author', password='pass12345', visibility=Visibility.PRIVATE
        )
        self.fan = User.objects.create_user(email='fan@example.com', profile_name='fan', password='pass12345')
        self.post = Post.objects.create(author=self.author, content="Private recap", visibility=Visibility.PRIVATE)
        self.list_url = reverse('comment-list', kwargs={'post_id': self.post.pk})

    def test_comments_of_hidden_post_are_not_found(self):
        self.client.force_authenticate(user=self.fan)
        self.assertEqual(self.client.get(self.list_url).status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.post(self.list_url, {'content': 'Let me in'})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(Comment.objects.exists())

    def test_owner_comments_and_lists(self):
        self.client.force_authenticate(user=self.author)
        response = self.client.post(self.list_url, {'content': 'Note to self'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['author'], 'author')
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_delete_comment_endpoint(self):
        comment = create_comment(self.post, self.author, "Remove me")
        self.client.force_authenticate(user=self.author)
        response = self.client.delete(reverse('comment-detail', kwargs={'pk': comment.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Comment.objects.exists())

    def test_delete_comment_on_hidden_post_is_not_found(self):
        comment = create_comment(self.post, self.author, "Hidden")
        self.client.force_authenticate(user=self.fan)
        response = self.client.delete(reverse('comment-detail', kwargs={'pk': comment.pk}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

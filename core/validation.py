# Vibe Write
# Copyright (C) 2026 Nomagev
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301, USA.

# validation.py
#
# Checks that run before any request is made.

from core.errors import ValidationError

MIN_PASSWORD_LENGTH = 6
DELETE_PHRASE = 'DELETE'


def validate_draft(doc):
    if not doc.title.strip():
        raise ValidationError("Please add a title before saving", field='title')


def validate_publish(doc):
    if not doc.title.strip():
        raise ValidationError("Please add a title before publishing", field='title')
    if not doc.body.strip():
        raise ValidationError("Please add some content before publishing", field='content')
    if not doc.category:
        raise ValidationError("Please select a category before publishing", field='category')


def validate_password(password, confirm):
    if password != confirm:
        raise ValidationError("Passwords do not match", field='confirmPassword')
    if len(password or '') < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field='password')


def validate_registration(data, confirm_password):
    for key in ('username', 'email', 'firstName', 'lastName'):
        if not (data.get(key) or '').strip():
            raise ValidationError(f"{key} is required", field=key)
    validate_password(data.get('password') or '', confirm_password)


def validate_delete_confirmation(phrase):
    if phrase != DELETE_PHRASE:
        raise ValidationError(f'Please type "{DELETE_PHRASE}" to confirm')


def validate_rejection_reason(reason):
    if not (reason or '').strip():
        raise ValidationError("Please provide a reason for rejection", field='reason')

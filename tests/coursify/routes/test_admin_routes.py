import pytest

from coursify.schemas import MAX_NAME_LENGTH


@pytest.fixture
def admin(make_user):
    return make_user('admin@x.com', 'admin')


@pytest.mark.parametrize(
    ('method', 'path'),
    [
        ('get', '/api/admin/users/pending'),
        ('get', '/api/admin/users/all'),
        ('get', '/api/admin/users/stats'),
        ('put', '/api/admin/users/some-id/approve'),
        ('delete', '/api/admin/users/some-id'),
    ],
)
@pytest.mark.parametrize('role', ['student', 'instructor'])
def test_admin_routes_forbid_other_roles(client, make_user, headers_for, method: str, path: str, role: str) -> None:
    caller = make_user(f'{role}@x.com', role)

    response = getattr(client, method)(path, headers=headers_for(caller))

    assert response.status_code == 403


def test_admin_routes_require_authentication(client) -> None:
    assert client.get('/api/admin/users/all').status_code == 401


def test_pending_users_and_count(client, admin, make_user, headers_for) -> None:
    pending = make_user('pending@x.com', 'student', status='pending')
    make_user('active@x.com', 'student')

    listed = client.get('/api/admin/users/pending', headers=headers_for(admin))
    count = client.get('/api/admin/users/pending/count', headers=headers_for(admin))

    assert [user['id'] for user in listed.json()] == [pending.id]
    assert count.json() == {'count': 1}


def test_user_stats(client, admin, make_user, headers_for) -> None:
    make_user('pending@x.com', 'student', status='pending')
    make_user('rejected@x.com', 'instructor', status='rejected')

    response = client.get('/api/admin/users/stats', headers=headers_for(admin))

    assert response.status_code == 200
    assert response.json() == {'total_users': 3, 'active_users': 1, 'pending_users': 1, 'rejected_users': 1}


def test_reject_then_get_user(client, admin, make_user, headers_for) -> None:
    target = make_user('pending@x.com', 'student', status='pending')

    rejected = client.put(f'/api/admin/users/{target.id}/reject', headers=headers_for(admin))
    detail = client.get(f'/api/admin/users/{target.id}', headers=headers_for(admin))

    assert rejected.status_code == 200
    assert rejected.json() == {'message': 'User rejected successfully'}
    assert detail.json()['status'] == 'rejected'


@pytest.mark.parametrize(
    ('method', 'path'),
    [
        ('put', '/api/admin/users/missing/approve'),
        ('put', '/api/admin/users/missing/reject'),
        ('get', '/api/admin/users/missing'),
        ('delete', '/api/admin/users/missing'),
    ],
)
def test_unknown_user_is_not_found(client, admin, headers_for, method: str, path: str) -> None:
    response = getattr(client, method)(path, headers=headers_for(admin))

    assert response.status_code == 404
    assert response.json() == {'detail': 'User not found'}


def test_update_user(client, admin, make_user, headers_for) -> None:
    target = make_user('student@x.com', 'student')

    response = client.put(
        f'/api/admin/users/{target.id}',
        json={'full_name': 'Renamed', 'role': 'instructor'},
        headers=headers_for(admin),
    )

    assert response.status_code == 200
    assert response.json()['full_name'] == 'Renamed'
    assert response.json()['role'] == 'instructor'
    assert response.json()['email'] == 'student@x.com'


def test_update_user_rejects_invalid_role(client, admin, make_user, headers_for) -> None:
    target = make_user('student@x.com', 'student')

    response = client.put(f'/api/admin/users/{target.id}', json={'role': 'owner'}, headers=headers_for(admin))

    assert response.status_code == 400


@pytest.mark.parametrize('full_name', ['n' * (MAX_NAME_LENGTH + 1), '   '])
def test_update_user_validates_full_name_like_registration(client, db, admin, make_user, headers_for, full_name) -> None:
    target = make_user('student@x.com', 'student')
    register = client.post(
        '/api/register',
        json={'full_name': full_name, 'email': 'new@x.com', 'password': 'pw', 'role': 'student'},
    )

    response = client.put(f'/api/admin/users/{target.id}', json={'full_name': full_name}, headers=headers_for(admin))

    assert register.status_code == 400
    assert response.status_code == 400
    db.refresh(target)
    assert target.full_name != full_name


def test_delete_user(client, admin, make_user, headers_for) -> None:
    target = make_user('student@x.com', 'student')
    target_id = target.id

    deleted = client.delete(f'/api/admin/users/{target_id}', headers=headers_for(admin))
    again = client.get(f'/api/admin/users/{target_id}', headers=headers_for(admin))

    assert deleted.status_code == 200
    assert again.status_code == 404

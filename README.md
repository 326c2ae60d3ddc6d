# baton-onelogin

A connector that reads a OneLogin account and reports its identity data as
resources, entitlements and grants:

- **users**, with e-mail, first and last name, status and manager;
- **roles**, each with a `member` and an `admin` entitlement; members and
  admins are granted to users, and the apps of a role are granted its `admin`
  entitlement;
- **apps**, each with a `member` entitlement granted to the users of the app;
- **groups**, each with a `member` entitlement granted to the users in it.

Users carry no entitlements or grants of their own.

Role membership can also be changed from Python: users can be granted or
revoked the `member` or `admin` entitlement of a role.

## Installation

```
pip install .
```

Python 3.10 or later is required. The only runtime dependency is `requests`.

## Credentials

Create an API credential in OneLogin with the *Manage All* scope. The
connector needs its client ID, its client secret and the subdomain of your
account (the `example` in `example.onelogin.com`). Before syncing, the command
checks the scope by reading the account's connectors and stops with an error
if that request fails.

## Command line

```
baton-onelogin \
    --onelogin-client-id example-client-id \
    --onelogin-client-secret secret \
    --subdomain example
```

Options, each of which can also be given in the environment:

| Option                     | Environment variable             | Default |
|----------------------------|----------------------------------|---------|
| `--onelogin-client-id`     | `BATON_ONELOGIN_CLIENT_ID`       |         |
| `--onelogin-client-secret` | `BATON_ONELOGIN_CLIENT_SECRET`   |         |
| `--subdomain`              | `BATON_SUBDOMAIN`                |         |
| `--output`                 | `BATON_OUTPUT`                   | `-`     |
| `--log-level`              | `BATON_LOG_LEVEL`                | `info`  |

A command-line option takes precedence over its environment variable. The
first three are required; if any is missing the command prints
`onelogin-client-id, onelogin-client-secret and subdomain must be provided`
and exits with status 1. `--log-level` is one of `debug`, `info`, `warning`
or `error`. `--version` prints the version and `--help` lists the options.

The command performs one full sync and writes the result as indented JSON to
standard output, or to the file named by `--output`. The document has three
lists:

- `resources`: `resource_type`, `resource`, `display_name`, `trait`,
  `profile`, `email` and `status` of every user, role, app and group;
- `entitlements`: `id` (`<type>:<resource>:<slug>`), `resource_type`,
  `resource`, `slug`, `display_name`, `description` and `grantable_to`;
- `grants`: `id`, `entitlement`, `principal_type` and `principal`.

If authentication, validation or any API call fails, the error is printed and
the command exits with status 1.

## Using it from Python

```python
from baton_onelogin.connector.connector import OneLogin

connector = OneLogin.create("example-client-id", "secret", "example")
connector.validate()
print(connector.metadata())
result = connector.sync()
print(result.to_dict())
```

`OneLogin.resource_syncers()` returns one syncer per resource type
(`UserSyncer`, `RoleSyncer`, `AppSyncer`, `GroupSyncer`). Each has `list`,
`entitlements` and `grants` methods that take a page token (an empty string
for the first page) and return one page of results together with the token of
the next page; an empty token means there are no more pages. Pages hold at
most 50 items.

`RoleSyncer.grant(principal, entitlement)` and `RoleSyncer.revoke(grant)`
change role membership; only user principals are accepted. Failures in the
syncers raise `ConnectorError` from `baton_onelogin.connector.resources`.

`UserSyncer` keeps a map of user ids to e-mail addresses, refreshed at most
every five minutes, to fill in each user's manager e-mail.

The lower-level API client is `baton_onelogin.onelogin.client.Client`;
`Client.create(session, client_id, client_secret, subdomain)` obtains an access
token with a `requests.Session`. Responses with a status of 300 or above raise
`RequestError`, which carries the `status_code`.

## What it does not do

- The command only syncs; granting and revoking role membership is available
  from Python alone.
- The sync result is a plain JSON document. There is no server mode, no
  incremental or scheduled sync, and nothing is stored between runs.

## Tests

```
pip install .[test]
pytest
```